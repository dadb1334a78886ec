"""Pytest 全局配置和 fixtures"""

import os

import pytest
import structlog

from logroute.config import ParserConfig
from logroute.models.message import Message


@pytest.fixture(autouse=True)
def reset_structlog():
    """每个测试结束后恢复 structlog 默认配置

    CLI 会把日志绑定到 CliRunner 的临时输出流,测试结束后该流已关闭。
    """
    yield
    structlog.reset_defaults()


@pytest.fixture(autouse=True)
def clean_logroute_env():
    """隔离 LOGROUTE_* 环境变量,load_dotenv 写入的变量不会泄露到其他测试"""
    saved = {key: value for key, value in os.environ.items() if key.startswith("LOGROUTE_")}
    for key in saved:
        del os.environ[key]
    yield
    for key in [key for key in os.environ if key.startswith("LOGROUTE_")]:
        del os.environ[key]
    os.environ.update(saved)


@pytest.fixture
def date_config():
    """按 ts 字段、yyyy-MM-dd 格式、每 1,000,000 条分桶的配置"""
    return ParserConfig(
        timestamp_name="ts",
        timestamp_input_pattern="yyyy-MM-dd",
        time_zone="UTC",
        offsets_per_partition=1_000_000,
    )


@pytest.fixture
def make_message():
    """构造消息的工厂"""

    def _make(payload, offset=0):
        return Message(payload=payload, offset=offset)

    return _make
