"""logroute 异常定义

区分配置错误(启动时致命)和单条消息的解析错误(本地恢复,不向调用方抛出)。
"""

from __future__ import annotations


class LogrouteError(Exception):
    """logroute 基础异常"""

    pass


class InvalidConfigurationError(LogrouteError, ValueError):
    """解析器配置无效

    包括：
    - offsets_per_partition 不是正整数
    - 输入时间格式为空、引号不成对或包含未知字母
    - 时区名称无法识别
    - 解析策略名称未注册

    属于部署配置错误,必须在构造解析器时抛出,不能被吞掉。
    """

    pass


class TimestampParseError(LogrouteError, ValueError):
    """时间戳不符合输入格式

    只在解析器内部使用,resolve 会把它转换为默认分区键。
    """

    def __init__(self, value: str, pattern: str, reason: str = "") -> None:
        self.value = value
        self.pattern = pattern
        self.reason = reason
        message = f"无法按格式 {pattern!r} 解析时间戳 {value!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
