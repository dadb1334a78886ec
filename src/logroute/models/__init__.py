"""数据模型"""

from logroute.models.message import Message, ParsedMessage

__all__ = ["Message", "ParsedMessage"]
