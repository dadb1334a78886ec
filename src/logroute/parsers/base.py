"""消息解析器基类

所有分区策略必须实现 extract_partitions。基类负责 JSON 解码、字段查找和
offset 分桶这些策略之间共用的逻辑。
"""

from abc import ABC, abstractmethod
from typing import Any

import orjson

from logroute.config import ParserConfig
from logroute.exceptions import InvalidConfigurationError
from logroute.models.message import Message, ParsedMessage


class MessageParser(ABC):
    """分区解析器抽象基类"""

    def __init__(self, config: ParserConfig) -> None:
        """初始化解析器

        Args:
            config: 解析器配置

        Raises:
            InvalidConfigurationError: offsets_per_partition 不是正整数
        """
        if config.offsets_per_partition <= 0:
            raise InvalidConfigurationError(
                f"offsets_per_partition 必须为正整数: {config.offsets_per_partition}"
            )
        self.config = config
        separator = config.timestamp_name_separator
        if separator:
            self._field_path = config.timestamp_name.split(separator)
        else:
            self._field_path = [config.timestamp_name]

    @abstractmethod
    def extract_partitions(self, message: Message) -> list[str]:
        """计算消息的分区路径片段

        Args:
            message: 已消费的消息

        Returns:
            list[str]: 分区片段,如 ["dt=2021-06-01&offset=1000000"]
        """
        pass

    def parse(self, message: Message) -> ParsedMessage:
        """解析消息并附带分区信息"""
        return ParsedMessage(message=message, partitions=self.extract_partitions(message))

    def offset_bucket(self, offset: int) -> int:
        """offset 所在分桶的起始位置

        恰好落在边界上的 offset 属于以它开头的分桶。
        """
        size = self.config.offsets_per_partition
        return (offset // size) * size

    @staticmethod
    def load_json_object(payload: bytes | str) -> dict[str, Any] | None:
        """把 payload 解码为 JSON 对象

        Returns:
            解码后的字典;payload 不是合法 JSON 或顶层不是对象时返回 None
        """
        try:
            data = orjson.loads(payload)
        except orjson.JSONDecodeError:
            return None
        if not isinstance(data, dict):
            return None
        return data

    def get_json_field_value(self, json_object: dict[str, Any]) -> Any:
        """查找配置的时间戳字段

        配置了 timestamp_name_separator 时,字段名按分隔符拆分,逐层进入嵌套对象。

        Returns:
            字段值;字段不存在、中间层不是对象或值为 null 时返回 None
        """
        current: Any = json_object
        for name in self._field_path:
            if not isinstance(current, dict):
                return None
            current = current.get(name)
            if current is None:
                return None
        return current
