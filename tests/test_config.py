# test_config.py
import json
import pathlib
import sys
from pathlib import Path

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

from config import TransitionPolicy, get_settings

CONFIG = json.loads(Path(__file__).resolve().parents[1].joinpath("config.json").read_text())


def _settings():
    get_settings.cache_clear()
    return get_settings()


def _fake_config(monkeypatch, data):
    monkeypatch.setattr(Path, "read_text", lambda self: json.dumps(data))


def test_defaults_from_config(monkeypatch):
    monkeypatch.delenv("REDIS_URL", raising=False)
    settings = _settings()
    assert settings.redis_url == CONFIG["redis_url"]
    assert settings.ledger_url == CONFIG["ledger_url"]


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("REDIS_URL", "redis://override")
    monkeypatch.setenv("CACHE_TTL_SECONDS", "5")
    settings = _settings()
    assert settings.redis_url == "redis://override"
    assert settings.cache_ttl_seconds == 5.0


def test_policy_read_from_config(monkeypatch):
    monkeypatch.delenv("TRANSITION_POLICY", raising=False)
    _fake_config(monkeypatch, {**CONFIG, "transition_policy": "forward_only"})
    assert _settings().transition_policy == TransitionPolicy.FORWARD_ONLY


def test_missing_key_uses_default(monkeypatch):
    monkeypatch.delenv("TRANSITION_POLICY", raising=False)
    _fake_config(
        monkeypatch,
        {k: v for k, v in CONFIG.items() if k not in ("transition_policy", "order_prefix")},
    )
    settings = _settings()
    assert settings.transition_policy == TransitionPolicy.TERMINAL_LOCKED
    assert settings.order_prefix == "HPY"


def teardown_module():
    get_settings.cache_clear()
