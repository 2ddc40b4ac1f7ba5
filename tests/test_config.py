from pydantic import ValidationError
import pytest

from mcslp import client
from mcslp.config import SlpConfig, config
from mcslp.endpoint import Endpoint
from mcslp.packets import build_handshake

from conftest import FakeConnection, status_frame


def test_config_defaults() -> None:
    defaults = SlpConfig(_env_file=None)

    assert defaults.timeout == 5.0
    assert defaults.protocol_version == 1156
    assert defaults.default_port == 25565
    assert defaults.resolve_srv
    assert not defaults.strict_frame


def test_config_reads_prefixed_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MCSLP_TIMEOUT", "2.5")
    monkeypatch.setenv("MCSLP_RESOLVE_SRV", "false")

    settings = SlpConfig(_env_file=None)

    assert settings.timeout == 2.5
    assert not settings.resolve_srv


def test_config_rejects_invalid_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MCSLP_DEFAULT_PORT", "70000")

    with pytest.raises(ValidationError):
        SlpConfig(_env_file=None)


def test_probe_uses_configured_protocol_version(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, "protocol_version", 47)
    conn = FakeConnection(status_frame(b"{}"))

    client.probe(Endpoint("127.0.0.1", 25565), connector=lambda e, t: conn)

    assert conn.written.startswith(build_handshake("127.0.0.1", 25565, 1, 47))
