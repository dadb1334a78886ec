"""命令行入口"""

from logroute.cli.main import cli

__all__ = ["cli"]
