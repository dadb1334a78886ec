"""分区路由

按解析器计算的分区键对消息分组,并把分区键映射为存储目录。
"""

from collections.abc import Iterable
from pathlib import Path

import structlog

from logroute.models.message import Message
from logroute.parsers.base import MessageParser

logger = structlog.get_logger()


def get_partition_path(base_dir: str | Path, partition_key: str, topic: str = "") -> Path:
    """生成分区目录路径

    格式: base_dir/[topic/]dt=YYYY-MM-DD/offset=N

    分区键中的 & 和 / 都作为目录层级分隔。

    Args:
        base_dir: 基础目录
        partition_key: 分区键,如 dt=2021-06-01&offset=1000000
        topic: 消息来源 topic,为空时不加这一级目录

    Returns:
        分区目录路径

    Raises:
        ValueError: 分区键为空、包含 .. 这样的路径片段,或 topic 不是单级目录名
    """
    segments = [s for s in partition_key.replace("&", "/").split("/") if s]
    if not segments:
        raise ValueError(f"无效的分区键: {partition_key!r}")
    if any(s in (".", "..") for s in segments):
        raise ValueError(f"分区键不能包含相对路径片段: {partition_key!r}")

    if topic:
        if "/" in topic or topic in (".", ".."):
            raise ValueError(f"无效的 topic: {topic!r}")
        segments.insert(0, topic)

    return Path(base_dir).joinpath(*segments)


def group_messages_by_partition(
    messages: Iterable[Message],
    parser: MessageParser,
) -> dict[str, list[Message]]:
    """按分区分组消息

    每个分区内保持消息的消费顺序。

    Args:
        messages: 消息序列
        parser: 分区解析器

    Returns:
        分区键 -> 消息列表的字典
    """
    partitions: dict[str, list[Message]] = {}
    total = 0

    for message in messages:
        total += 1
        partition_key = parser.parse(message).partition_key
        partitions.setdefault(partition_key, []).append(message)

    logger.info(
        "messages_grouped_by_partition",
        total_messages=total,
        partition_count=len(partitions),
    )

    return partitions
