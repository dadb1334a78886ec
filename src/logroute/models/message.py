"""消息数据模型定义

定义从上游消费到的消息,以及解析出分区后的结果。
"""

from pydantic import BaseModel, Field


class Message(BaseModel):
    """一条已消费的消息

    payload 通常是 UTF-8 编码的 JSON,但不保证合法。
    """

    payload: bytes | str = Field(..., description="消息原始内容")
    offset: int = Field(..., ge=0, description="消息在源流中的位置")
    topic: str = Field(default="", description="来源 topic,存储时作为分区目录的上一级")

    model_config = {"frozen": True}


class ParsedMessage(BaseModel):
    """附带分区信息的消息"""

    message: Message
    partitions: list[str] = Field(..., description="分区路径片段")

    model_config = {"frozen": True}

    @property
    def partition_key(self) -> str:
        """多个分区片段用 / 拼接"""
        return "/".join(self.partitions)
