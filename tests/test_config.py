"""Tests for configuration helpers."""
from trusted_proxies.config import Settings, get_settings


def test_trusted_proxies_parses_comma_separated_list():
    settings = Settings(trusted_proxies_raw=" 10.0.0.1, 192.168.0.0/16 ,, ")

    assert settings.trusted_proxies == ["10.0.0.1", "192.168.0.0/16"]


def test_trusted_proxies_read_from_environment(monkeypatch):
    monkeypatch.setenv("TRUSTED_PROXIES", "10.10.10.10,20.20.20.20")
    monkeypatch.setenv("TRUSTED_PROXIES_STRICT", "false")
    monkeypatch.setenv("FORWARDED_FOR_HEADER", "X-Client-Chain")

    settings = get_settings()

    assert settings.trusted_proxies == ["10.10.10.10", "20.20.20.20"]
    assert settings.trusted_proxies_strict is False
    assert settings.forwarded_for_header == "X-Client-Chain"


def test_defaults(monkeypatch):
    monkeypatch.delenv("TRUSTED_PROXIES", raising=False)

    settings = Settings()

    assert settings.trusted_proxies == []
    assert settings.trusted_proxies_strict is True
    assert settings.forwarded_for_header == "X-Forwarded-For"
    assert settings.client_ip_resolution_enabled is True
