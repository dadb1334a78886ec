"""logroute CLI 工具

对 JSONL 文件中的每条 payload 计算分区键,便于在上线前核对配置。

用法:
    logroute resolve messages.jsonl --pattern "yyyy-MM-dd'T'HH:mm:ss" --timestamp-name ts
    logroute resolve messages.jsonl --config config/logroute.yaml --summary
"""

import sys
from pathlib import Path
from typing import IO

import click

from logroute import __version__
from logroute.config import ParserConfig, load_parser_config
from logroute.exceptions import InvalidConfigurationError
from logroute.models.message import Message
from logroute.parsers.factory import available_parsers, create_parser
from logroute.services.routing import group_messages_by_partition
from logroute.utils.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="logroute")
def cli():
    """logroute - 消息分区键解析工具"""
    pass


def _build_config(config_path: Path | None, **overrides) -> ParserConfig:
    """合并配置文件(或环境变量)与命令行参数"""
    overrides = {key: value for key, value in overrides.items() if value is not None}
    if config_path is None:
        return load_parser_config(**overrides)

    data = ParserConfig.load_from_yaml(config_path).model_dump()
    data.update(overrides)
    return ParserConfig.from_dict(data)


def _read_messages(source: IO[bytes], start_offset: int):
    for index, line in enumerate(source):
        yield Message(payload=line.rstrip(b"\r\n"), offset=start_offset + index)


@cli.command()
@click.argument("source", type=click.File("rb"))
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML 配置文件路径 (默认读取 LOGROUTE_* 环境变量)",
)
@click.option("--parser", "-p", type=click.Choice(available_parsers()), help="分区策略")
@click.option("--timestamp-name", "-t", help="时间戳字段名或路径")
@click.option("--separator", help="嵌套字段分隔符")
@click.option("--pattern", help="输入时间格式,如 yyyy-MM-dd'T'HH:mm:ss")
@click.option("--time-zone", "-z", help="时区 (默认: UTC)")
@click.option("--offsets-per-partition", "-n", type=int, help="每个 offset 分桶的消息数")
@click.option(
    "--start-offset",
    type=click.IntRange(min=0),
    default=0,
    show_default=True,
    help="第一行消息的 offset",
)
@click.option("--summary", "-s", is_flag=True, help="只输出每个分区键的消息数")
@click.option(
    "--log-level",
    "-l",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="日志级别 (日志输出到 stderr)",
)
def resolve(
    source,
    config_path,
    parser,
    timestamp_name,
    separator,
    pattern,
    time_zone,
    offsets_per_partition,
    start_offset,
    summary,
    log_level,
):
    """计算 JSONL 文件中每条消息的分区键

    每行是一条消息的 payload,offset 从 --start-offset 开始按行号递增。
    默认输出 "<offset>\\t<分区键>",--summary 输出 "<分区键>\\t<消息数>"。

    示例:
        logroute resolve messages.jsonl -t ts --pattern yyyy-MM-dd
        logroute resolve - -c config/logroute.yaml --summary < messages.jsonl
    """
    configure_logging(level=log_level, json_format=False, stream=sys.stderr)

    try:
        config = _build_config(
            config_path,
            parser=parser,
            timestamp_name=timestamp_name,
            timestamp_name_separator=separator,
            timestamp_input_pattern=pattern,
            time_zone=time_zone,
            offsets_per_partition=offsets_per_partition,
        )
        message_parser = create_parser(config)
    except (InvalidConfigurationError, FileNotFoundError) as e:
        click.secho(f"❌ 配置无效: {e}", fg="red", err=True)
        sys.exit(1)

    messages = _read_messages(source, start_offset)

    if summary:
        partitions = group_messages_by_partition(messages, message_parser)
        for partition_key, partition_messages in partitions.items():
            click.echo(f"{partition_key}\t{len(partition_messages)}")
        return

    for message in messages:
        parsed = message_parser.parse(message)
        click.echo(f"{message.offset}\t{parsed.partition_key}")


if __name__ == "__main__":
    cli()
