"""按 offset 分区的解析器"""

from logroute.models.message import Message
from logroute.parsers.base import MessageParser


class OffsetMessageParser(MessageParser):
    """只按 offset 分桶,分区片段为 offset=<分桶起点>

    不读取 payload,因此不会回退到默认值。
    """

    def extract_partition_key(self, message: Message) -> str:
        return f"offset={self.offset_bucket(message.offset)}"

    def extract_partitions(self, message: Message) -> list[str]:
        return [self.extract_partition_key(message)]
