"""时区工具"""

from datetime import UTC, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from logroute.exceptions import InvalidConfigurationError


def resolve_time_zone(name: str) -> tzinfo:
    """根据名称获取时区

    Args:
        name: IANA 时区名称,如 UTC、Asia/Shanghai

    Returns:
        tzinfo: 时区对象

    Raises:
        InvalidConfigurationError: 时区名称无法识别
    """
    if not name:
        raise InvalidConfigurationError("时区名称不能为空")
    if name.upper() in ("UTC", "GMT", "Z"):
        return UTC
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as e:
        raise InvalidConfigurationError(f"无法识别的时区: {name}") from e
