"""Pytest configuration and fixtures.

Every test runs in its own temporary working directory with the proxy and
PUML_EXPORT_* environment variables removed and the user config and log
directories redirected, so local configuration never leaks into tests.

The `mock_server` fixture stands in for a PlantUML server; it records every
request and answers with a body derived from the request URL.
"""

import logging
import os
from logging.handlers import RotatingFileHandler

import httpx
import platformdirs
import pytest
from rich.logging import RichHandler

from puml_export.infrastructure import config as config_module


class MockPlantUmlServer:
    """Fake PlantUML server backed by `httpx.MockTransport`."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.failing_tokens: set[str] = set()
        self.connect_error = False

    @staticmethod
    def body_for(url: str) -> bytes:
        return f"<svg><!-- rendered {url} --></svg>".encode()

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.connect_error:
            raise httpx.ConnectError("Connection refused", request=request)
        token = request.url.path.rsplit("/", 1)[-1]
        if token in self.failing_tokens:
            return httpx.Response(500, content=b"Internal Server Error")
        return httpx.Response(self.status_code, content=self.body_for(str(request.url)))

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    @property
    def urls(self) -> list[str]:
        return [str(request.url) for request in self.requests]


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Isolate tests from the user's environment and configuration files."""
    for var in list(os.environ):
        if var.upper().startswith("PUML_EXPORT_") or var.lower() == "http_proxy":
            monkeypatch.delenv(var, raising=False)

    work_dir = tmp_path / "work"
    work_dir.mkdir()
    monkeypatch.chdir(work_dir)

    user_config_dir = tmp_path / "user-config"
    user_log_dir = tmp_path / "user-log"
    monkeypatch.setattr(platformdirs, "user_config_dir", lambda *args, **kwargs: str(user_config_dir))
    monkeypatch.setattr(platformdirs, "user_log_dir", lambda *args, **kwargs: str(user_log_dir))

    monkeypatch.setattr(config_module, "_config", None)
    yield work_dir


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo the changes `setup_logging` makes to the global logging state."""
    root_logger = logging.getLogger()
    saved_handlers = root_logger.handlers[:]
    saved_levels = {
        name: logging.getLogger(name).level for name in ("", "puml_export", "httpx", "httpcore")
    }
    yield
    for handler in root_logger.handlers[:]:
        if isinstance(handler, (RichHandler, RotatingFileHandler)):
            handler.close()
            root_logger.removeHandler(handler)
    for handler in saved_handlers:
        if handler not in root_logger.handlers:
            root_logger.addHandler(handler)
    for name, level in saved_levels.items():
        logging.getLogger(name).setLevel(level)


@pytest.fixture
def work_dir(isolated_environment):
    return isolated_environment


@pytest.fixture
def mock_server():
    return MockPlantUmlServer()


@pytest.fixture
def patched_client_factory(mock_server, monkeypatch):
    """Make `run_export` use the mock server instead of the network."""

    def create_mock_client(proxy=None, timeout=None):
        return mock_server.client()

    monkeypatch.setattr("puml_export.core.dispatcher.create_client", create_mock_client)
    return mock_server


@pytest.fixture
def diagram_text():
    return "@startuml\nAlice->Bob\n@enduml"
