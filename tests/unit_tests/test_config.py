import json

from klondike.config import LAYOUT_MODES, Settings, load_settings, next_layout, save_settings


def test_defaults_when_file_missing(tmp_path):
    settings = load_settings(str(tmp_path / "missing.json"), environ={})
    assert settings == Settings()
    assert settings.bot_interval_ms == 1200
    assert settings.deal_interval_ms == 50


def test_file_values_then_environment_overrides(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"bot_interval_ms": 300, "layout": "normal", "seed": 5}), encoding="utf-8")
    settings = load_settings(str(path), environ={"KLONDIKE_BOT_INTERVAL_MS": "250", "KLONDIKE_SEED": "17"})
    assert settings.bot_interval_ms == 250
    assert settings.layout == "normal"
    # seed is not persisted, only the environment sets it
    assert settings.seed == 17


def test_bad_values_are_ignored_with_a_warning(tmp_path, caplog):
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")
    with caplog.at_level("WARNING", logger="klondike.config"):
        settings = load_settings(str(path), environ={"KLONDIKE_LAYOUT": "giant", "KLONDIKE_DEAL_INTERVAL_MS": "fast"})
    assert settings == Settings()
    assert "layout" in caplog.text
    assert "deal_interval_ms" in caplog.text


def test_save_then_load_persists_only_known_keys(tmp_path):
    path = tmp_path / "sub" / "settings.json"
    assert save_settings(Settings(layout="ultra-compact", seed=3), str(path))
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data == {"bot_interval_ms": 1200, "deal_interval_ms": 50, "layout": "ultra-compact"}
    assert load_settings(str(path), environ={}).layout == "ultra-compact"


def test_next_layout_cycles():
    assert [next_layout(m) for m in LAYOUT_MODES] == ["compact", "ultra-compact", "normal"]
    assert next_layout("bogus") == "compact"


def test_unknown_log_level_falls_back(tmp_path):
    settings = load_settings(str(tmp_path / "none.json"), environ={"KLONDIKE_LOG_LEVEL": "loud"})
    assert settings.log_level == "WARNING"
    assert load_settings(str(tmp_path / "none.json"), environ={"KLONDIKE_LOG_LEVEL": "debug"}).log_level == "DEBUG"
