import json

import pytest

from niche_vetter.config import EngineConfig


def test_defaults_match_production_thresholds():
    config = EngineConfig()
    assert config.max_competitors == 35
    assert config.bsr_stability_floor == 0.30
    assert config.price_stability_floor == 0.35
    assert config.top_competitor_count == 5
    assert config.neutral_stability == 0.5
    assert config.auto_fail_ceiling == 39
    assert (config.pass_threshold, config.risky_threshold) == (70, 40)


def test_load_from_file(tmp_path):
    path = tmp_path / "engine.json"
    path.write_text(json.dumps({"max_competitors": 25, "bsr_stability_floor": "0.4"}))
    config = EngineConfig.load(path)
    assert config.max_competitors == 25
    assert isinstance(config.max_competitors, int)
    assert config.bsr_stability_floor == pytest.approx(0.4)
    assert config.price_stability_floor == 0.35


def test_load_from_env(tmp_path, monkeypatch):
    monkeypatch.setenv("NICHE_VETTER_TOP_COMPETITOR_COUNT", "3")
    monkeypatch.setenv("NICHE_VETTER_PASS_THRESHOLD", "75")
    config = EngineConfig.load(tmp_path / "missing.json")
    assert config.top_competitor_count == 3
    assert config.pass_threshold == 75


def test_malformed_file_is_rejected(tmp_path):
    path = tmp_path / "engine.json"
    path.write_text('{"max_competitors": 20,')
    with pytest.raises(ValueError, match="Invalid JSON in config file"):
        EngineConfig.load(path)


def test_non_object_file_is_rejected(tmp_path):
    path = tmp_path / "engine.json"
    path.write_text("[1]")
    with pytest.raises(ValueError, match="must be a JSON object, got list"):
        EngineConfig.load(path)


def test_unknown_key_is_rejected():
    with pytest.raises(ValueError, match="Unknown configuration keys: weights"):
        EngineConfig.from_mapping({"weights": 1})


def test_non_numeric_value_is_rejected():
    with pytest.raises(ValueError, match="max_competitors"):
        EngineConfig.from_mapping({"max_competitors": "many"})
