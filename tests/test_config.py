"""Tests for configuration loading."""

from pathlib import Path

from taskline.config import Config, ConfigModel, load_config, save_config


class TestConfigModel:
    """Test the configuration model."""

    def test_defaults(self):
        config = ConfigModel()
        assert config.data_file == "tasks.txt"
        assert config.reject_duplicates is True
        assert config.log_level == "WARNING"
        assert config.data_path == Path(config.data_dir) / "tasks.txt"

    def test_absolute_data_file_wins(self, tmp_path):
        config = ConfigModel(data_dir=str(tmp_path / "a"), data_file=str(tmp_path / "b.txt"))
        assert config.data_path == tmp_path / "b.txt"

    def test_yaml_round_trip(self, tmp_path):
        config = ConfigModel(data_dir=str(tmp_path), reject_duplicates=False, log_level="debug")
        restored = ConfigModel.from_yaml(config.to_yaml())
        assert restored == config
        assert restored.log_level == "DEBUG"

    def test_unknown_keys_are_ignored(self):
        config = ConfigModel.from_yaml("data_file: other.txt\ntheme: dark\n")
        assert config.data_file == "other.txt"

    def test_non_mapping_falls_back_to_defaults(self):
        assert ConfigModel.from_yaml("- just\n- a list\n") == ConfigModel()

    def test_invalid_log_level(self):
        assert ConfigModel(log_level="LOUD").log_level == "WARNING"


class TestConfigManager:
    """Test loading and saving config files."""

    def test_missing_file_is_created(self, tmp_path):
        path = tmp_path / "conf" / "config.yaml"
        config = load_config(path)
        assert path.exists()
        assert config == ConfigModel()

    def test_load_existing_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        save_config(ConfigModel(data_dir=str(tmp_path), data_file="mine.txt"), path)
        config = load_config(path)
        assert config.data_path == tmp_path / "mine.txt"

    def test_load_is_cached_until_reload(self, tmp_path):
        path = tmp_path / "config.yaml"
        save_config(ConfigModel(data_file="first.txt"), path)
        assert load_config(path).data_file == "first.txt"

        save_config(ConfigModel(data_file="second.txt"), path)
        assert load_config(path).data_file == "first.txt"
        assert Config.reload(path).data_file == "second.txt"

    def test_broken_yaml_uses_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("data_file: [unclosed\n", encoding="utf-8")
        assert load_config(path) == ConfigModel()
