"""conftest"""

import time

import pytest
from fastapi.testclient import TestClient

from fizzbuzz.config import Config
from fizzbuzz.main import create_app
from fizzbuzz.render import Renderer
from fizzbuzz.statistics import Statistics


@pytest.fixture(scope="function")
def client():
    with TestClient(create_app(Config())) as test_client:
        yield test_client


@pytest.fixture(scope="function")
def renderer():
    test_renderer = Renderer(Statistics())
    yield test_renderer
    test_renderer.shutdown()


@pytest.fixture
def wait_for():
    def wait(predicate, timeout=5.0):
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if predicate():
                return True
            time.sleep(0.01)
        return predicate()

    return wait
