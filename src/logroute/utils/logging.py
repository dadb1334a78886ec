"""结构化日志配置

使用 structlog 和 orjson 输出 JSON 日志,开发环境可切换为控制台格式。
"""

import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import IO, Any

import orjson
import structlog
from structlog.types import EventDict, Processor


def orjson_dumps(obj: Any, **kwargs: Any) -> str:
    """使用 orjson 序列化日志事件

    PrintLogger 只接受字符串,因此这里解码为 str。

    Args:
        obj: 事件字典
        **kwargs: JSONRenderer 传入的额外参数(被忽略)

    Returns:
        str: JSON 字符串
    """
    return orjson.dumps(obj, default=str).decode("utf-8")


def add_timestamp(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """添加 ISO 8601 格式的 UTC 时间戳"""
    event_dict["timestamp"] = datetime.now(UTC).isoformat()
    return event_dict


def add_log_level(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """添加大写的日志级别字段"""
    if method_name == "warn":
        method_name = "warning"
    event_dict["level"] = method_name.upper()
    return event_dict


def configure_logging(
    level: str = "INFO",
    log_file: str | None = None,
    json_format: bool = True,
    stream: IO[str] | None = None,
) -> None:
    """配置全局日志系统

    Args:
        level: 日志级别(DEBUG/INFO/WARNING/ERROR/CRITICAL)
        log_file: 日志文件路径(可选),设置后日志同时写入 stream 和该文件
        json_format: 是否使用 JSON 格式(True)或人类可读格式(False)
        stream: 日志输出流,默认 stderr,避免和 CLI 的 stdout 输出混在一起
    """
    stream = stream or sys.stderr

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        add_timestamp,
        add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    renderer: Processor
    if json_format:
        renderer = structlog.processors.JSONRenderer(serializer=orjson_dumps)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    wrapper_class = structlog.make_filtering_bound_logger(logging.getLevelName(level.upper()))

    if not log_file:
        structlog.configure(
            processors=[*shared_processors, renderer],
            wrapper_class=wrapper_class,
            context_class=dict,
            logger_factory=structlog.PrintLoggerFactory(file=stream),
            cache_logger_on_first_use=False,
        )

        # 标准库 logging 供第三方库使用
        logging.basicConfig(
            format="%(message)s",
            level=level.upper(),
            stream=stream,
            force=True,
        )
        return

    # 写文件时 structlog 经由标准库 logging 输出,stream 和文件共用同一个格式化器
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        foreign_pre_chain=shared_processors,
    )
    stream_handler = logging.StreamHandler(stream)
    stream_handler.setFormatter(formatter)
    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setFormatter(formatter)

    logging.basicConfig(
        level=level.upper(),
        handlers=[stream_handler, file_handler],
        force=True,
    )

    structlog.configure(
        processors=[*shared_processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=wrapper_class,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """获取结构化日志记录器

    Args:
        name: 日志记录器名称(可选),通常使用模块名 __name__

    Returns:
        structlog.BoundLogger: 结构化日志记录器
    """
    return structlog.get_logger(name)
