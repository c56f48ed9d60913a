from __future__ import annotations

from typing import Iterable

from services.session import build_default_session
from settings import get_settings


def _clear_caches(caches: Iterable) -> None:
    for cache in caches:
        cache.cache_clear()


def test_environment_overrides_apply(monkeypatch) -> None:
    monkeypatch.setenv("HISTORY_SIZE", "5")
    monkeypatch.setenv("BOTTLE_CAPACITY_LITERS", "2.5")
    monkeypatch.setenv("LOG_LEVEL", " debug ")

    caches = (get_settings, build_default_session)
    _clear_caches(caches)

    try:
        settings = get_settings()
        session = build_default_session()

        assert settings.log_level == "DEBUG"
        assert session.registry.history_size == 5
        assert session.registry.default_capacity == 2.5
        assert session.registry.get_or_create("red").state.capacity == 2.5
    finally:
        _clear_caches(caches)


def test_invalid_values_fall_back_to_defaults(monkeypatch) -> None:
    monkeypatch.setenv("HISTORY_SIZE", "zero")
    monkeypatch.setenv("BOTTLE_CAPACITY_LITERS", "-1")
    monkeypatch.setenv("LOG_LEVEL", "   ")

    get_settings.cache_clear()
    try:
        settings = get_settings()

        assert settings.history_size == 10
        assert settings.capacity_liters == 1.0
        assert settings.log_level == "INFO"
    finally:
        get_settings.cache_clear()
