"""Tests for settings parsing."""

from homesense.config import Settings


def test_defaults():
    cfg = Settings()
    assert cfg.presence_input_size == 320
    assert cfg.input_image_width == 224
    assert cfg.model_signature_key == "serving_default"
    assert cfg.person_class_id_set == frozenset({1})


def test_person_class_ids_parsing():
    cfg = Settings(person_class_ids=" 1, 2,,")
    assert cfg.person_class_id_set == frozenset({1, 2})


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("PRESENCE_THRESHOLD", "0.7")
    monkeypatch.setenv("HOG_FALLBACK_ENABLED", "false")
    cfg = Settings()
    assert cfg.presence_threshold == 0.7
    assert cfg.hog_fallback_enabled is False
