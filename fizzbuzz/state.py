"""Application dependencies and state."""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request as HTTPRequest

from fizzbuzz.render import Renderer
from fizzbuzz.statistics import Statistics

log = logging.getLogger(__name__)


def get_renderer(http_request: HTTPRequest) -> Renderer:
    """Return the renderer built by the lifespan."""
    return http_request.app.state.renderer


def get_statistics(http_request: HTTPRequest) -> Statistics:
    """Return the statistics shared by every render."""
    return http_request.app.state.renderer.statistics


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the statistics store and the renderer, stop the renderer on exit"""
    renderer = Renderer(Statistics())
    app.state.renderer = renderer
    log.debug("Renderer started for %s", app.state.config.environment)
    yield
    renderer.shutdown()
