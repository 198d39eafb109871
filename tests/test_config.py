import tomllib

from workflow_app.tracker.controllers import AppConfig, ConfigManager


def test_to_toml_roundtrip():
    cfg = AppConfig(data_path="C:\\Users\\me\\data.json", export_dir="exports", trend_window_days=14)

    toml_text = cfg.to_toml()
    assert 'export_dir = "exports"' in toml_text

    parsed = AppConfig.from_toml(tomllib.loads(toml_text))
    assert parsed.data_path == "C:\\Users\\me\\data.json"
    assert parsed.trend_window_days == 14
    assert parsed.gemini_model == "gemini-1.5-flash"


def test_from_toml_sanitizes_values():
    parsed = AppConfig.from_toml({
        "trend_window_days": "zero",
        "gemini_model": "",
    })
    assert parsed.trend_window_days == 7
    assert parsed.gemini_model == "gemini-1.5-flash"
    assert AppConfig.from_toml({"trend_window_days": -3}).trend_window_days == 1


def test_config_manager_seeds_defaults(tmp_path):
    manager = ConfigManager(tmp_path)
    assert (tmp_path / "config.toml").exists()
    assert manager.config.trend_window_days == 7
    assert manager.data_path == tmp_path / "data.json"
    assert manager.export_dir == tmp_path / "exports"


def test_config_manager_persists_changes(tmp_path):
    manager = ConfigManager(tmp_path)
    manager.config.trend_window_days = 30
    manager.save()
    assert ConfigManager(tmp_path).config.trend_window_days == 30


def test_invalid_config_file_falls_back_to_defaults(tmp_path):
    (tmp_path / "config.toml").write_text("trend_window_days = [", encoding="utf-8")
    manager = ConfigManager(tmp_path)
    assert manager.config.trend_window_days == 7
