"""按日期和 offset 分区的解析器

从 JSON 消息中取出时间戳字段,按输入格式解析,格式化为 dt=YYYY-MM-DD,
再拼接 offset 分桶,得到 dt=2021-06-01&offset=1000000 形式的分区键。

任何单条消息的错误都不会抛给调用方,而是返回默认分区键。
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

import orjson
import structlog

from logroute.config import ParserConfig
from logroute.exceptions import InvalidConfigurationError, TimestampParseError
from logroute.models.message import Message
from logroute.parsers.base import MessageParser
from logroute.parsers.pattern import DatePattern, format_date_key
from logroute.utils.timezone import resolve_time_zone

logger = structlog.get_logger()


class FallbackReason(Enum):
    """回退到默认分区键的原因"""

    MALFORMED_PAYLOAD = "malformed_payload"
    MISSING_FIELD = "missing_field"
    UNPARSABLE_TIMESTAMP = "unparsable_timestamp"


@dataclass(frozen=True)
class Resolution:
    """一次分区键计算的结果

    fallback 为 None 表示成功计算,否则 key 是默认分区键。
    """

    key: str
    fallback: FallbackReason | None = None

    @property
    def is_fallback(self) -> bool:
        return self.fallback is not None


def field_value_to_string(value: Any) -> str:
    """字段值的字符串形式

    字符串原样返回,其他 JSON 值使用 JSON 文本(true、123、1.5)。
    """
    if isinstance(value, str):
        return value
    return orjson.dumps(value).decode("utf-8")


class DateOffsetMessageParser(MessageParser):
    """日期 + offset 分区解析器"""

    # offset 段固定为 000000,不同于计算出的分桶格式
    DEFAULT_KEY = "dt=1970-01-01&offset=000000"

    def __init__(self, config: ParserConfig) -> None:
        """初始化解析器

        Raises:
            InvalidConfigurationError: 输入时间格式为空或无效、时区无法识别、
                offsets_per_partition 不是正整数
        """
        super().__init__(config)
        if not config.timestamp_input_pattern:
            raise InvalidConfigurationError("date_offset 解析器需要配置 timestamp_input_pattern")
        self.time_zone = resolve_time_zone(config.time_zone)
        self.input_pattern = DatePattern(config.timestamp_input_pattern, self.time_zone)

    def resolve(self, message: Message) -> str:
        """计算消息的分区键,失败时返回 DEFAULT_KEY"""
        return self.resolve_detailed(message).key

    # 与其他策略统一的接口名
    extract_partition_key = resolve

    def extract_partitions(self, message: Message) -> list[str]:
        return [self.resolve(message)]

    def resolve_detailed(self, message: Message) -> Resolution:
        """计算分区键并返回回退原因"""
        json_object = self.load_json_object(message.payload)
        if json_object is None:
            logger.debug("payload_not_json_object", offset=message.offset)
            return Resolution(self.DEFAULT_KEY, FallbackReason.MALFORMED_PAYLOAD)

        field_value = self.get_json_field_value(json_object)
        if field_value is None:
            logger.debug(
                "timestamp_field_missing",
                field=self.config.timestamp_name,
                offset=message.offset,
            )
            return Resolution(self.DEFAULT_KEY, FallbackReason.MISSING_FIELD)

        raw_value = field_value_to_string(field_value)
        try:
            parsed = self.input_pattern.parse(raw_value)
        except TimestampParseError as e:
            logger.warning(
                "timestamp_parse_failed",
                value=raw_value,
                pattern=self.input_pattern.pattern,
                default=self.DEFAULT_KEY,
                error=e.reason,
            )
            return Resolution(self.DEFAULT_KEY, FallbackReason.UNPARSABLE_TIMESTAMP)

        date_key = format_date_key(parsed, self.time_zone)
        return Resolution(f"dt={date_key}&offset={self.offset_bucket(message.offset)}")
