from __future__ import annotations

import asyncio

import pytest

from cesta.config import get_settings
from cesta.server import run


class _FakeServer:
    instances: list["_FakeServer"] = []

    def __init__(self, config):
        self.config = config
        self.should_exit = False
        self.ran = False
        self.served = False
        _FakeServer.instances.append(self)

    def run(self):
        self.ran = True

    async def serve(self):
        self.served = True
        while not self.should_exit:
            await asyncio.sleep(0.001)


@pytest.fixture()
def fake_server(monkeypatch):
    _FakeServer.instances = []
    monkeypatch.setattr(run.uvicorn, "Server", _FakeServer)
    return _FakeServer


def _settings(monkeypatch, **env):
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    get_settings.cache_clear()


def test_main_serves_app_factory_from_settings(monkeypatch, fake_server):
    _settings(monkeypatch, CESTA_SERVER_HOST="0.0.0.0", CESTA_SERVER_PORT="9001")

    run.main()

    (server,) = fake_server.instances
    assert server.ran
    assert server.config.app == "cesta.server.app:create_app"
    assert server.config.factory is True
    assert server.config.host == "0.0.0.0"
    assert server.config.port == 9001
    assert server.config.log_config is None


def test_invalid_port_and_duration_fall_back_to_defaults(monkeypatch, fake_server):
    _settings(monkeypatch, CESTA_SERVER_PORT="http", CESTA_SERVER_DURATION="-3")

    run.main()

    (server,) = fake_server.instances
    assert server.config.port == 8000
    assert server.ran


def test_duration_stops_server(monkeypatch, fake_server):
    _settings(monkeypatch, CESTA_SERVER_DURATION="0.01")

    run.main()

    (server,) = fake_server.instances
    assert server.served
    assert server.should_exit
    assert not server.ran


def test_reload_with_duration_is_rejected(monkeypatch, fake_server):
    _settings(monkeypatch, CESTA_SERVER_RELOAD="1", CESTA_SERVER_DURATION="5")

    with pytest.raises(SystemExit):
        run.main()
    assert fake_server.instances == []
