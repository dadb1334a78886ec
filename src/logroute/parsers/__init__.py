"""分区解析器

- base: 解析器基类,负责 JSON 解码、字段查找、offset 分桶
- date_offset: 日期 + offset 分区
- offset: 仅 offset 分区
- pattern: 输入时间格式编译
- factory: 按配置选择策略
"""

from logroute.parsers.base import MessageParser
from logroute.parsers.date_offset import (
    DateOffsetMessageParser,
    FallbackReason,
    Resolution,
)
from logroute.parsers.factory import available_parsers, create_parser, register_parser
from logroute.parsers.offset import OffsetMessageParser
from logroute.parsers.pattern import DatePattern, format_date_key

__all__ = [
    "MessageParser",
    "DateOffsetMessageParser",
    "OffsetMessageParser",
    "FallbackReason",
    "Resolution",
    "DatePattern",
    "format_date_key",
    "create_parser",
    "register_parser",
    "available_parsers",
]
