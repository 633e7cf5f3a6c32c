"""test config, logging and command line"""

import json
import logging

import pytest
from pydantic import ValidationError

from fizzbuzz.config import Config
from fizzbuzz.logs import JSONFormatter, setup_logging
from fizzbuzz.main import run


@pytest.fixture
def root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def test_config_defaults():
    config = Config()
    assert config.host == "127.0.0.1"
    assert config.port == 8080
    assert config.environment == "development"
    assert not config.tls_enabled


def test_config_env(monkeypatch):
    monkeypatch.setenv("SERVER_PORT", "9000")
    monkeypatch.setenv("SERVER_ENVIRONMENT", "production")
    monkeypatch.setenv("SERVER_TLSCERT", "cert.pem")
    config = Config()
    assert config.port == 9000
    assert config.environment == "production"
    assert config.tlscert == "cert.pem"
    # key missing
    assert not config.tls_enabled


def test_config_cli_overrides_env(monkeypatch):
    monkeypatch.setenv("SERVER_PORT", "9000")
    config = Config(_cli_parse_args=["--port", "9001", "--tlscert", "c", "--tlskey", "k"])
    assert config.port == 9001
    assert config.tls_enabled


def test_config_invalid():
    with pytest.raises(ValidationError):
        Config(port=0)
    with pytest.raises(ValidationError):
        Config(environment="staging")


@pytest.mark.parametrize(
    "environment, level",
    [("development", logging.DEBUG), ("production", logging.INFO)],
)
def test_setup_logging(root_logger, environment, level):
    assert setup_logging(environment) == level
    assert len(root_logger.handlers) == 1


def test_json_formatter():
    record = logging.LogRecord(
        "fizzbuzz.main", logging.INFO, __file__, 1, "%s - %s", ("GET", "/render"), None
    )
    entry = json.loads(JSONFormatter().format(record))
    assert entry["level"] == "info"
    assert entry["logger"] == "fizzbuzz.main"
    assert entry["msg"] == "GET - /render"


def test_run(mocker):
    setup_mock = mocker.patch("fizzbuzz.main.setup_logging")
    run_mock = mocker.patch("fizzbuzz.main.uvicorn.run")
    run(["--host", "0.0.0.0", "--port", "9000", "--environment", "production"])

    setup_mock.assert_called_once_with("production")
    (app,), kwargs = run_mock.call_args
    assert app.state.config.port == 9000
    assert kwargs == {
        "host": "0.0.0.0",
        "port": 9000,
        "timeout_keep_alive": 60,
        "log_config": None,
    }


def test_run_tls(mocker):
    mocker.patch("fizzbuzz.main.setup_logging")
    run_mock = mocker.patch("fizzbuzz.main.uvicorn.run")
    run(["--tlscert", "cert.pem", "--tlskey", "key.pem"])

    kwargs = run_mock.call_args.kwargs
    assert kwargs["ssl_certfile"] == "cert.pem"
    assert kwargs["ssl_keyfile"] == "key.pem"
