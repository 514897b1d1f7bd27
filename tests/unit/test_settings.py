from __future__ import annotations

from pathlib import Path

import pytest

from chatsim.lib.settings import AppSettings, ResponderSettings
from chatsim.utils.env import get_config_val, get_env


def test_unset_value_returns_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("CHATSIM_TEST_VALUE", raising=False)

    assert get_config_val("CHATSIM_TEST_VALUE", 42) == 42


@pytest.mark.parametrize(
    ("raw", "default", "expected"),
    [
        ("17", 0, 17),
        ("2.5", 0.0, 2.5),
        ("yes", False, True),
        ("off", True, False),
        ("/tmp/chat", Path("/srv"), Path("/tmp/chat")),
        ("plain", "x", "plain"),
    ],
)
def test_value_is_coerced_to_default_type(
    monkeypatch: pytest.MonkeyPatch,
    raw: str,
    default: object,
    expected: object,
) -> None:
    monkeypatch.setenv("CHATSIM_TEST_VALUE", raw)

    assert get_config_val("CHATSIM_TEST_VALUE", default) == expected


@pytest.mark.parametrize("raw", ['["a", "b"]', "a, b", "a,b,"])
def test_list_values(monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
    monkeypatch.setenv("CHATSIM_TEST_VALUE", raw)

    assert get_config_val("CHATSIM_TEST_VALUE", [], list[str]) == ["a", "b"]


def test_get_env_reads_lazily(monkeypatch: pytest.MonkeyPatch) -> None:
    factory = get_env("CHATSIM_TEST_VALUE", 1)
    monkeypatch.setenv("CHATSIM_TEST_VALUE", "9")

    assert factory() == 9


def test_responder_settings_reject_inverted_range(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RESPONDER_MIN_DELAY_MS", "3000")
    monkeypatch.setenv("RESPONDER_MAX_DELAY_MS", "1000")

    with pytest.raises(ValueError, match="MIN_DELAY_MS"):
        ResponderSettings()


def test_responder_settings_reject_negative_lead_in(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RESPONDER_IMAGE_LEAD_IN_MIN_MS", "-1")

    with pytest.raises(ValueError, match="IMAGE_LEAD_IN_MIN_MS"):
        ResponderSettings()


def test_cors_origins_accept_comma_list(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ALLOWED_CORS_ORIGINS", "http://a.test, http://b.test")

    assert AppSettings().ALLOWED_CORS_ORIGINS == ["http://a.test", "http://b.test"]
