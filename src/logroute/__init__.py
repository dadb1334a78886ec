"""logroute - 日志摄入流水线的消息分区键解析"""

from logroute.config import ParserConfig, load_parser_config
from logroute.exceptions import InvalidConfigurationError, LogrouteError
from logroute.models.message import Message, ParsedMessage
from logroute.parsers import (
    DateOffsetMessageParser,
    MessageParser,
    OffsetMessageParser,
    create_parser,
)

__version__ = "0.1.0"

__all__ = [
    "ParserConfig",
    "load_parser_config",
    "InvalidConfigurationError",
    "LogrouteError",
    "Message",
    "ParsedMessage",
    "MessageParser",
    "DateOffsetMessageParser",
    "OffsetMessageParser",
    "create_parser",
    "__version__",
]
