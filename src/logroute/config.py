"""
配置管理模块

解析器配置可以来自 YAML 文件,也可以来自环境变量和 .env 文件。
配置在构造解析器时一次性校验,之后不可变。
"""

import os
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]
from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from logroute.exceptions import InvalidConfigurationError
from logroute.utils.timezone import resolve_time_zone

ENV_PREFIX = "LOGROUTE_"

# 环境变量名 -> 配置字段
ENV_FIELDS = {
    "PARSER": "parser",
    "TIMESTAMP_NAME": "timestamp_name",
    "TIMESTAMP_NAME_SEPARATOR": "timestamp_name_separator",
    "TIMESTAMP_INPUT_PATTERN": "timestamp_input_pattern",
    "TIME_ZONE": "time_zone",
    "OFFSETS_PER_PARTITION": "offsets_per_partition",
}


class ParserConfig(BaseModel):
    """分区解析器配置"""

    parser: str = Field(default="date_offset", description="分区策略名称")
    timestamp_name: str = Field(default="timestamp", description="时间戳字段名或路径")
    timestamp_name_separator: str = Field(
        default="", description="嵌套字段分隔符,为空表示不按路径查找"
    )
    timestamp_input_pattern: str | None = Field(
        default=None, description="输入时间格式,如 yyyy-MM-dd'T'HH:mm:ss"
    )
    time_zone: str = Field(default="UTC", description="解析和输出共用的时区")
    offsets_per_partition: int = Field(
        default=10_000_000, gt=0, description="每个 offset 分桶包含的消息数"
    )

    model_config = {"frozen": True, "extra": "forbid"}

    @field_validator("time_zone")
    @classmethod
    def validate_time_zone(cls, v: str) -> str:
        """时区必须可识别"""
        resolve_time_zone(v)
        return v

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ParserConfig":
        """从字典创建配置,校验失败时抛出 InvalidConfigurationError"""
        try:
            return cls(**data)
        except ValidationError as e:
            raise InvalidConfigurationError(f"无效的解析器配置: {e}") from e

    @classmethod
    def load_from_yaml(cls, config_path: str | Path) -> "ParserConfig":
        """从 YAML 文件加载配置

        支持顶层直接写字段,或者放在 parser_config 段下。
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"配置文件不存在: {config_path}")
        try:
            with open(config_path, encoding="utf-8") as f:
                config_data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise InvalidConfigurationError(f"无效的 YAML 格式: {e}") from e

        if not isinstance(config_data, dict):
            raise InvalidConfigurationError(f"配置文件顶层必须是映射: {config_path}")

        section = config_data.get("parser_config", config_data)
        if not isinstance(section, dict):
            raise InvalidConfigurationError("parser_config 段必须是映射")
        return cls.from_dict(section)


def load_parser_config(
    dotenv_path: str | Path | None = None,
    **overrides: Any,
) -> ParserConfig:
    """从环境变量加载解析器配置

    优先级:
    1. overrides 关键字参数(值为 None 的忽略)
    2. LOGROUTE_* 环境变量 (从 .env 文件或系统环境变量)
    3. ParserConfig 默认值

    Args:
        dotenv_path: .env 文件路径,None 时从当前工作目录向上查找
        **overrides: 覆盖的配置字段

    Returns:
        ParserConfig: 校验后的配置
    """
    if dotenv_path is not None:
        load_dotenv(dotenv_path=dotenv_path)
    else:
        load_dotenv(find_dotenv(usecwd=True))

    data: dict[str, Any] = {}
    for env_name, field_name in ENV_FIELDS.items():
        value = os.getenv(f"{ENV_PREFIX}{env_name}")
        if value is not None:
            data[field_name] = value

    data.update({key: value for key, value in overrides.items() if value is not None})
    return ParserConfig.from_dict(data)
