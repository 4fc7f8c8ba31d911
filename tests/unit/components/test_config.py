"""
Unit tests for configuration loading.
"""

from wardmap.config import Config, get_config, get_config_path, load_config, reset_config


def write_config(tmp_path, body: str) -> None:
    path = tmp_path / "config" / "wardmap" / "config.toml"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(body)


class TestConfigPath:
    def test_respects_xdg(self, tmp_path):
        assert get_config_path() == tmp_path / "config" / "wardmap" / "config.toml"


class TestLoadConfig:
    def test_defaults_without_file(self):
        config = load_config()
        assert config == Config()
        assert config.features.new_pipelines
        assert config.limits.max_title == 200

    def test_file_overrides(self, tmp_path):
        write_config(tmp_path, """
[features]
new_pipelines = false

[limits]
max_size = 3000

[defaults]
evolve_maturity = 0.9
""")
        config = load_config()
        assert not config.features.new_pipelines
        assert config.limits.max_size == 3000
        assert config.defaults.evolve_maturity == 0.9

    def test_unknown_keys_ignored(self, tmp_path):
        write_config(tmp_path, "[limits]\nnot_a_key = 3\n")
        assert load_config() == Config()

    def test_unreadable_file_falls_back(self, tmp_path, caplog):
        write_config(tmp_path, "[limits\nbroken")
        assert load_config() == Config()
        assert "Ignoring unreadable config" in caplog.text

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        write_config(tmp_path, "[limits]\nmax_title = 50\n")
        monkeypatch.setenv("WARDMAP_MAX_TITLE", "80")
        monkeypatch.setenv("WARDMAP_NEW_PIPELINES", "no")
        config = load_config()
        assert config.limits.max_title == 80
        assert not config.features.new_pipelines

    def test_bad_env_value_ignored(self, monkeypatch):
        monkeypatch.setenv("WARDMAP_MIN_SIZE", "small")
        assert load_config().limits.min_size == 100


class TestGlobalConfig:
    def test_cached_until_reset(self, monkeypatch):
        first = get_config()
        assert get_config() is first
        monkeypatch.setenv("WARDMAP_MAX_SIZE", "4000")
        reset_config()
        assert get_config().limits.max_size == 4000
