"""Tests for configuration management."""

import pytest
import yaml

from bigvector.config import (
    ConfigManager,
    VectorConfig,
    create_default_config_file,
    get_config,
)
from bigvector.errors import ConfigurationError


class TestVectorConfig:
    """Test VectorConfig dataclass."""

    def test_defaults(self):
        config = VectorConfig()
        assert config.dimension == 1024
        assert config.window_size == 17
        assert config.top_k == 20
        assert config.query_document == "data/pg1661.txt"
        assert config.query_word == "sea"
        assert config.on_error == "abort"
        assert config.labels == {}

    @pytest.mark.parametrize("kwargs,parameter", [
        ({"window_size": 16}, "window_size"),
        ({"window_size": 1}, "window_size"),
        ({"dimension": 0}, "dimension"),
        ({"top_k": 0}, "top_k"),
        ({"on_error": "ignore"}, "on_error"),
        ({"max_workers": 0}, "max_workers"),
        ({"encoding": "utf-99"}, "encoding"),
        ({"encoding": 8}, "encoding"),
    ])
    def test_invalid_values(self, kwargs, parameter):
        with pytest.raises(ConfigurationError) as exc_info:
            VectorConfig(**kwargs)
        assert exc_info.value.parameter == parameter
        assert isinstance(exc_info.value, ValueError)

    def test_round_trip(self):
        config = VectorConfig(dimension=256, labels={"a.txt": "Author"})
        assert VectorConfig.from_dict(config.to_dict()) == config

    def test_from_dict_ignores_unknown_keys(self):
        config = VectorConfig.from_dict({"top_k": 5, "colour": "blue"})
        assert config.top_k == 5

    def test_label(self):
        config = VectorConfig(labels={"data/pg2701.txt": "Herman Melville"})
        assert config.label("data/pg2701.txt") == "Herman Melville"
        assert config.label("data/unknown.txt") == ""


class TestConfigManager:
    """Test ConfigManager functionality."""

    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        for suffix in ConfigManager.ENV_OVERRIDES:
            monkeypatch.delenv(f"{ConfigManager.ENV_PREFIX}{suffix}", raising=False)

    def test_load_missing_file_gives_defaults(self, tmp_path):
        config = ConfigManager(tmp_path / "none.yml").load()
        assert config == VectorConfig()

    def test_load_file(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text(yaml.dump({"dimension": 512, "query_word": "whale",
                                   "labels": {"data/pg2701.txt": "Herman Melville"}}))
        config = ConfigManager(path).load()
        assert config.dimension == 512
        assert config.query_word == "whale"
        assert config.labels["data/pg2701.txt"] == "Herman Melville"

    def test_invalid_file(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text(yaml.dump({"window_size": 4}))
        with pytest.raises(ConfigurationError):
            ConfigManager(path).load()

    def test_non_mapping_file(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(ConfigurationError):
            ConfigManager(path).load()

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("top_k: [1\n")
        with pytest.raises(ConfigurationError) as exc_info:
            ConfigManager(path).load()
        assert str(path) in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, yaml.YAMLError)

    def test_env_overrides(self, tmp_path, monkeypatch):
        path = tmp_path / "config.yml"
        path.write_text(yaml.dump({"top_k": 7}))
        monkeypatch.setenv("BIGVECTOR_TOP_K", "3")
        monkeypatch.setenv("BIGVECTOR_QUERY_WORD", "ship")
        config = ConfigManager(path).load()
        assert config.top_k == 3
        assert config.query_word == "ship"

    def test_invalid_env_value(self, tmp_path, monkeypatch):
        monkeypatch.setenv("BIGVECTOR_DIMENSION", "wide")
        with pytest.raises(ConfigurationError):
            ConfigManager(tmp_path / "none.yml").load()

    def test_update(self, tmp_path):
        manager = ConfigManager(tmp_path / "none.yml")
        config = manager.update(top_k=3, query_word=None, bogus=1)
        assert config.top_k == 3
        assert config.query_word == "sea"
        with pytest.raises(ConfigurationError):
            manager.update(window_size=8)

    def test_save_and_reload(self, tmp_path):
        path = tmp_path / "nested" / "config.yml"
        manager = ConfigManager(path)
        assert manager.save(VectorConfig(top_k=9))
        assert get_config(path).top_k == 9

    def test_create_default_config_file(self, tmp_path):
        path = tmp_path / ".bigvector.yml"
        assert create_default_config_file(path)
        data = yaml.safe_load(path.read_text())
        assert data["window_size"] == 17
        assert data["dimension"] == 1024

    def test_display(self, tmp_path, capsys):
        ConfigManager(tmp_path / "none.yml").display()
        captured = capsys.readouterr()
        assert "window_size" in captured.out
