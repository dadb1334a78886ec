"""时间格式编译

把 yyyy-MM-dd 风格的时间格式编译为正则表达式,用于从消息字段中解析时间戳,
并提供固定的 yyyy-MM-dd 输出格式。

编译结果只包含不可变的正则和时区对象,可以在多个线程之间共享。
"""

import re
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from logroute.exceptions import InvalidConfigurationError, TimestampParseError

# 标准格式语言中存在、但这里不支持的字母(周、季度等)
UNSUPPORTED_LETTERS = set("GYwWDFuKk")
SUPPORTED_LETTERS = set("yMdHhmsSEaZXz")
NUMERIC_LETTERS = set("ydHhmsS")

MONTH_NAMES = [
    "january",
    "february",
    "march",
    "april",
    "may",
    "june",
    "july",
    "august",
    "september",
    "october",
    "november",
    "december",
]
DAY_NAMES = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

GMT_OFFSET_RE = re.compile(r"^(?:GMT|UTC)([+-])(\d{1,2}):?(\d{2})$")


def format_date_key(value: datetime, tz: tzinfo) -> str:
    """按固定输出格式 yyyy-MM-dd 格式化日期

    Args:
        value: 带时区的时间
        tz: 输出时区

    Returns:
        日期字符串 YYYY-MM-DD
    """
    local = value.astimezone(tz)
    return f"{local.year:04d}-{local.month:02d}-{local.day:02d}"


@dataclass(frozen=True)
class PatternField:
    """格式中的一个字段,如 yyyy 中 letter='y', width=4"""

    letter: str
    width: int

    @property
    def numeric(self) -> bool:
        if self.letter == "M":
            return self.width <= 2
        return self.letter in NUMERIC_LETTERS


def tokenize_pattern(pattern: str) -> list[str | PatternField]:
    """把时间格式拆分为字面量和字段

    单引号包围的内容是字面量,两个连续单引号表示一个单引号。

    Raises:
        InvalidConfigurationError: 格式为空、引号不成对或包含未知字母
    """
    if not pattern:
        raise InvalidConfigurationError("输入时间格式不能为空")

    tokens: list[str | PatternField] = []
    literal: list[str] = []
    i = 0
    length = len(pattern)

    def flush_literal() -> None:
        if literal:
            tokens.append("".join(literal))
            literal.clear()

    while i < length:
        ch = pattern[i]

        if ch == "'":
            if i + 1 < length and pattern[i + 1] == "'":
                literal.append("'")
                i += 2
                continue
            # 引号内的字面量
            i += 1
            closed = False
            while i < length:
                if pattern[i] == "'":
                    if i + 1 < length and pattern[i + 1] == "'":
                        literal.append("'")
                        i += 2
                        continue
                    closed = True
                    i += 1
                    break
                literal.append(pattern[i])
                i += 1
            if not closed:
                raise InvalidConfigurationError(f"时间格式中的引号不成对: {pattern!r}")
            continue

        if ("a" <= ch <= "z") or ("A" <= ch <= "Z"):
            if ch in UNSUPPORTED_LETTERS:
                raise InvalidConfigurationError(f"不支持的时间格式字母 {ch!r}: {pattern!r}")
            if ch not in SUPPORTED_LETTERS:
                raise InvalidConfigurationError(f"未知的时间格式字母 {ch!r}: {pattern!r}")
            start = i
            while i < length and pattern[i] == ch:
                i += 1
            flush_literal()
            tokens.append(PatternField(ch, i - start))
            continue

        literal.append(ch)
        i += 1

    flush_literal()
    return tokens


def _names_alternation(names: list[str]) -> str:
    """全称和三字母缩写的正则分支,长的在前"""
    options = set(names) | {name[:3] for name in names}
    return "|".join(sorted(options, key=len, reverse=True))


def _field_regex(field: PatternField, adjacent: bool) -> str:
    """单个字段对应的正则(不含分组)

    与另一个数字字段相邻时按格式宽度读取固定位数,否则读取全部连续数字,
    超出范围的值在解析时拒绝。
    """
    letter, width = field.letter, field.width

    if letter == "y":
        if adjacent:
            return rf"\d{{{width}}}"
        return r"\d+"
    if letter == "M" and width >= 3:
        return f"(?i:{_names_alternation(MONTH_NAMES)})"
    if letter == "E":
        return f"(?i:{_names_alternation(DAY_NAMES)})"
    if letter == "a":
        return "(?i:AM|PM)"
    if letter == "Z":
        return r"Z|[+-]\d{4}"
    if letter == "X":
        return r"Z|[+-]\d{2}(?::?\d{2})?"
    if letter == "z":
        return r"(?:GMT|UTC)[+-]\d{1,2}:?\d{2}|[A-Za-z_]+(?:/[A-Za-z0-9_+\-]+)*"
    if letter == "S":
        return rf"\d{{{width}}}" if adjacent else r"\d+"
    # M d H h m s
    if adjacent:
        return rf"\d{{{width}}}"
    return r"\d+"


def expand_two_digit_year(year: int, century_start: int) -> int:
    """两位年份换算为 century_start 起 100 年内的年份"""
    expanded = century_start - century_start % 100 + year
    if expanded < century_start:
        expanded += 100
    return expanded


def _parse_offset_zone(text: str) -> tzinfo:
    """解析 Z / +0800 / +08 / +08:00 形式的时区偏移"""
    if text.upper() == "Z":
        return UTC
    sign = -1 if text[0] == "-" else 1
    digits = text[1:].replace(":", "")
    hours = int(digits[:2])
    minutes = int(digits[2:4]) if len(digits) > 2 else 0
    if hours > 23 or minutes > 59:
        raise ValueError(f"时区偏移超出范围: {text}")
    return timezone(sign * timedelta(hours=hours, minutes=minutes))


def _parse_named_zone(text: str) -> tzinfo:
    """解析 UTC / GMT+08:00 / Asia/Shanghai 形式的时区名称"""
    if text.upper() in ("UTC", "GMT", "Z"):
        return UTC
    match = GMT_OFFSET_RE.match(text)
    if match:
        sign, hours, minutes = match.groups()
        return _parse_offset_zone(f"{sign}{int(hours):02d}{minutes}")
    try:
        return ZoneInfo(text)
    except (ZoneInfoNotFoundError, ValueError, OSError) as e:
        raise ValueError(f"无法识别的时区: {text}") from e


class DatePattern:
    """编译后的输入时间格式

    parse 只要求字符串的前缀符合格式,格式之后的多余内容被忽略。
    没有时区信息的时间按配置时区解释;带时区的时间会换算到配置时区。
    """

    def __init__(self, pattern: str, tz: tzinfo) -> None:
        self.pattern = pattern
        self.tz = tz
        self._fields: dict[str, PatternField] = {}

        tokens = tokenize_pattern(pattern)
        parts: list[str] = []
        for index, token in enumerate(tokens):
            if isinstance(token, str):
                parts.append(re.escape(token))
                continue
            following = tokens[index + 1] if index + 1 < len(tokens) else None
            adjacent = token.numeric and isinstance(following, PatternField) and following.numeric
            group = f"f{index}"
            self._fields[group] = token
            parts.append(f"(?P<{group}>{_field_regex(token, adjacent)})")

        self._regex = re.compile("".join(parts))
        self._has_hour24 = any(f.letter == "H" for f in self._fields.values())
        # 两位年份落在 [当前年份 - 80, 当前年份 + 20) 区间内
        self._century_start = datetime.now(tz).year - 80

    def __repr__(self) -> str:
        return f"DatePattern({self.pattern!r}, tz={self.tz})"

    def parse(self, text: str) -> datetime:
        """解析时间戳字符串

        Args:
            text: 时间戳字符串

        Returns:
            datetime: 配置时区下的时间

        Raises:
            TimestampParseError: 字符串不符合格式或日期超出范围
        """
        match = self._regex.match(text)
        if not match:
            raise TimestampParseError(text, self.pattern, "格式不匹配")

        values = {
            "year": 1970,
            "month": 1,
            "day": 1,
            "hour": 0,
            "minute": 0,
            "second": 0,
        }
        hour12: int | None = None
        pm: bool | None = None
        millis = 0
        zone: tzinfo | None = None

        try:
            for group, field in self._fields.items():
                raw = match.group(group)
                letter = field.letter
                if letter == "y":
                    year = int(raw)
                    if field.width == 2 and len(raw) == 2:
                        year = expand_two_digit_year(year, self._century_start)
                    values["year"] = year
                elif letter == "M":
                    if field.width >= 3:
                        values["month"] = _name_index(raw, MONTH_NAMES) + 1
                    else:
                        values["month"] = int(raw)
                elif letter == "d":
                    values["day"] = int(raw)
                elif letter == "H":
                    values["hour"] = int(raw)
                elif letter == "h":
                    hour12 = int(raw)
                    if not 1 <= hour12 <= 12:
                        raise ValueError(f"12 小时制的小时超出范围: {hour12}")
                elif letter == "a":
                    pm = raw.upper() == "PM"
                elif letter == "m":
                    values["minute"] = int(raw)
                elif letter == "s":
                    values["second"] = int(raw)
                elif letter == "S":
                    millis = int(raw)
                elif letter in ("Z", "X"):
                    zone = _parse_offset_zone(raw)
                elif letter == "z":
                    zone = _parse_named_zone(raw)

            # H 优先,a 只修饰 h
            if hour12 is not None and not self._has_hour24:
                values["hour"] = hour12 % 12 + (12 if pm else 0)

            parsed = datetime(**values) + timedelta(milliseconds=millis)
        except (ValueError, OverflowError) as e:
            raise TimestampParseError(text, self.pattern, str(e)) from e

        if zone is None:
            return parsed.replace(tzinfo=self.tz)
        try:
            return parsed.replace(tzinfo=zone).astimezone(self.tz)
        except (ValueError, OverflowError) as e:
            raise TimestampParseError(text, self.pattern, str(e)) from e


def _name_index(raw: str, names: list[str]) -> int:
    lowered = raw.lower()
    for index, name in enumerate(names):
        if lowered == name or lowered == name[:3]:
            return index
    raise ValueError(f"无法识别的名称: {raw}")
