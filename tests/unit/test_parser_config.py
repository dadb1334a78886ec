"""
配置模块测试

测试 ParserConfig 校验、YAML 加载和环境变量加载。
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from logroute.config import ParserConfig, load_parser_config
from logroute.exceptions import InvalidConfigurationError


class TestParserConfig:
    """ParserConfig 校验测试"""

    def test_defaults(self):
        config = ParserConfig()

        assert config.parser == "date_offset"
        assert config.time_zone == "UTC"
        assert config.timestamp_name_separator == ""
        assert config.timestamp_input_pattern is None
        assert config.offsets_per_partition > 0

    @pytest.mark.parametrize("value", [0, -1])
    def test_offsets_per_partition_must_be_positive(self, value):
        with pytest.raises(ValidationError):
            ParserConfig(offsets_per_partition=value)

    def test_unknown_time_zone(self):
        with pytest.raises(ValidationError):
            ParserConfig(time_zone="Mars/Olympus")

    def test_frozen(self):
        config = ParserConfig()

        with pytest.raises(ValidationError):
            config.time_zone = "Asia/Tokyo"

    def test_from_dict_wraps_validation_error(self):
        with pytest.raises(InvalidConfigurationError, match="offsets_per_partition"):
            ParserConfig.from_dict({"offsets_per_partition": 0})

    def test_from_dict_rejects_unknown_keys(self):
        with pytest.raises(InvalidConfigurationError):
            ParserConfig.from_dict({"timestamp_nmae": "ts"})

    @pytest.mark.parametrize("zone_name", ["America", "Etc", "A" * 300])
    def test_zone_name_that_cannot_be_loaded(self, zone_name):
        """时区名称是 tzdata 目录或过长时按配置错误处理"""
        with pytest.raises(InvalidConfigurationError, match="time_zone"):
            ParserConfig.from_dict({"time_zone": zone_name})


class TestLoadFromYaml:
    """YAML 加载测试"""

    def test_load_section(self, tmp_path: Path):
        config_file = tmp_path / "logroute.yaml"
        config_file.write_text(
            "parser_config:\n"
            "  timestamp_name: ts\n"
            "  timestamp_input_pattern: yyyy-MM-dd\n"
            "  time_zone: Asia/Shanghai\n"
            "  offsets_per_partition: 1000\n",
            encoding="utf-8",
        )

        config = ParserConfig.load_from_yaml(config_file)

        assert config.timestamp_name == "ts"
        assert config.timestamp_input_pattern == "yyyy-MM-dd"
        assert config.time_zone == "Asia/Shanghai"
        assert config.offsets_per_partition == 1000

    def test_load_top_level(self, tmp_path: Path):
        config_file = tmp_path / "logroute.yaml"
        config_file.write_text("parser: offset\noffsets_per_partition: 50\n", encoding="utf-8")

        config = ParserConfig.load_from_yaml(config_file)

        assert config.parser == "offset"
        assert config.offsets_per_partition == 50

    def test_empty_file_uses_defaults(self, tmp_path: Path):
        config_file = tmp_path / "logroute.yaml"
        config_file.write_text("", encoding="utf-8")

        assert ParserConfig.load_from_yaml(config_file) == ParserConfig()

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            ParserConfig.load_from_yaml(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path: Path):
        config_file = tmp_path / "logroute.yaml"
        config_file.write_text("parser: [unclosed\n", encoding="utf-8")

        with pytest.raises(InvalidConfigurationError, match="YAML"):
            ParserConfig.load_from_yaml(config_file)

    def test_non_mapping(self, tmp_path: Path):
        config_file = tmp_path / "logroute.yaml"
        config_file.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(InvalidConfigurationError):
            ParserConfig.load_from_yaml(config_file)


class TestLoadParserConfig:
    """环境变量加载测试"""

    def test_from_environment(self, monkeypatch, tmp_path: Path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("LOGROUTE_TIMESTAMP_NAME", "event_time")
        monkeypatch.setenv("LOGROUTE_TIMESTAMP_INPUT_PATTERN", "yyyyMMdd")
        monkeypatch.setenv("LOGROUTE_OFFSETS_PER_PARTITION", "500")

        config = load_parser_config()

        assert config.timestamp_name == "event_time"
        assert config.timestamp_input_pattern == "yyyyMMdd"
        assert config.offsets_per_partition == 500

    def test_from_dotenv_file(self, tmp_path: Path):
        dotenv_file = tmp_path / ".env"
        dotenv_file.write_text(
            "LOGROUTE_PARSER=offset\nLOGROUTE_TIME_ZONE=Europe/Berlin\n",
            encoding="utf-8",
        )

        config = load_parser_config(dotenv_path=dotenv_file)

        assert config.parser == "offset"
        assert config.time_zone == "Europe/Berlin"

    def test_environment_wins_over_dotenv(self, monkeypatch, tmp_path: Path):
        dotenv_file = tmp_path / ".env"
        dotenv_file.write_text("LOGROUTE_TIME_ZONE=Europe/Berlin\n", encoding="utf-8")
        monkeypatch.setenv("LOGROUTE_TIME_ZONE", "Asia/Tokyo")

        config = load_parser_config(dotenv_path=dotenv_file)

        assert config.time_zone == "Asia/Tokyo"

    def test_overrides_win(self, monkeypatch, tmp_path: Path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("LOGROUTE_TIMESTAMP_NAME", "event_time")

        config = load_parser_config(timestamp_name="ts", time_zone=None)

        assert config.timestamp_name == "ts"
        assert config.time_zone == "UTC"

    def test_invalid_environment_value(self, monkeypatch, tmp_path: Path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("LOGROUTE_OFFSETS_PER_PARTITION", "zero")

        with pytest.raises(InvalidConfigurationError):
            load_parser_config()
