"""分区策略工厂

根据 ParserConfig.parser 选择具体的解析器实现。
"""

import structlog

from logroute.config import ParserConfig
from logroute.exceptions import InvalidConfigurationError
from logroute.parsers.base import MessageParser
from logroute.parsers.date_offset import DateOffsetMessageParser
from logroute.parsers.offset import OffsetMessageParser

logger = structlog.get_logger()

_REGISTRY: dict[str, type[MessageParser]] = {
    "offset": OffsetMessageParser,
    "date_offset": DateOffsetMessageParser,
}


def register_parser(name: str, parser_class: type[MessageParser]) -> None:
    """注册新的分区策略

    Raises:
        TypeError: parser_class 不是 MessageParser 子类
    """
    if not (isinstance(parser_class, type) and issubclass(parser_class, MessageParser)):
        raise TypeError(f"{parser_class!r} 不是 MessageParser 子类")
    _REGISTRY[name] = parser_class


def available_parsers() -> list[str]:
    return sorted(_REGISTRY)


def create_parser(config: ParserConfig) -> MessageParser:
    """按配置创建解析器

    Raises:
        InvalidConfigurationError: 策略名称未注册,或策略自身的配置校验失败
    """
    parser_class = _REGISTRY.get(config.parser)
    if parser_class is None:
        raise InvalidConfigurationError(
            f"未知的分区策略: {config.parser} (可选: {', '.join(available_parsers())})"
        )

    parser = parser_class(config)
    logger.info(
        "parser_created",
        parser=config.parser,
        timestamp_name=config.timestamp_name,
        time_zone=config.time_zone,
        offsets_per_partition=config.offsets_per_partition,
    )
    return parser
