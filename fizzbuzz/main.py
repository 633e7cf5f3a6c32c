"""fizzbuzz main app"""

from itertools import islice
from typing import Annotated
import logging
import sys

import uvicorn
from fastapi import APIRouter, FastAPI, Depends, Query, Request as HTTPRequest
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from fizzbuzz import models
from fizzbuzz.config import Config
from fizzbuzz.logs import setup_logging
from fizzbuzz.render import Renderer
from fizzbuzz.state import lifespan, get_renderer, get_statistics
from fizzbuzz.statistics import Statistics

log = logging.getLogger(__name__)

router = APIRouter()

# items pulled between two client disconnection checks
CHUNK_SIZE = 1000


def request_uri(http_request: HTTPRequest) -> str:
    uri = http_request.url.path
    if http_request.url.query:
        uri += "?" + http_request.url.query
    return uri


def api_error(http_request: HTTPRequest, status_code: int, message: str):
    """Log and wrap an error in the response envelope"""
    log.error(
        "%s - %s - %d - %s",
        http_request.method,
        request_uri(http_request),
        status_code,
        message,
    )
    return JSONResponse(
        status_code=status_code,
        content=models.ApiResponse(error=True, response=message).model_dump(),
    )


async def parameter_error_handler(http_request: HTTPRequest, exc: models.ParameterError):
    return api_error(http_request, 400, exc.message)


async def log_requests(http_request: HTTPRequest, call_next):
    log.info("%s - %s", http_request.method, request_uri(http_request))
    return await call_next(http_request)


def take(items, count: int) -> list[str]:
    return list(islice(items, count))


@router.get("/render", response_model=models.ApiResponse, status_code=200)
async def render(
    http_request: HTTPRequest,
    query: Annotated[models.RenderQuery, Query()],
    renderer: Renderer = Depends(get_renderer),
):
    """GET Render

    Items are pulled in chunks, the render is cancelled as soon as the
    client disconnects.
    """
    request = query.to_request()
    with renderer.render(request) as response:
        if response.error is not None:
            return api_error(http_request, 400, response.error.message)
        items = []
        stream = iter(response)
        while chunk := await run_in_threadpool(take, stream, CHUNK_SIZE):
            items.extend(chunk)
            if await http_request.is_disconnected():
                response.cancel()
                return api_error(http_request, 499, "client disconnected")
        return models.ApiResponse(error=False, response=",".join(items))


@router.get("/statistics", response_model=models.ApiResponse, status_code=200)
def statistics(stats: Statistics = Depends(get_statistics)):
    """GET Statistics"""
    return models.ApiResponse(error=False, response=stats.get_top_statistic())


def create_app(config: Config | None = None) -> FastAPI:
    """Create the app

    Args:
        config (optional): defaults to the config loaded from envvars
    """
    config = config or Config()
    log.info(
        "Create server environment=%s address=%s:%d TLS=%s",
        config.environment,
        config.host,
        config.port,
        config.tls_enabled,
    )
    app = FastAPI(title="fizzbuzz", lifespan=lifespan)
    app.state.config = config
    app.include_router(router)
    app.middleware("http")(log_requests)
    app.add_exception_handler(models.ParameterError, parameter_error_handler)
    return app


def run(argv: list[str] | None = None):
    """Serve the app, flags override SERVER_* envvars"""
    config = Config(
        _cli_parse_args=sys.argv[1:] if argv is None else argv,
        _cli_prog_name="fizzbuzz-server",
    )
    setup_logging(config.environment)
    ssl = {}
    if config.tls_enabled:
        ssl = {"ssl_certfile": config.tlscert, "ssl_keyfile": config.tlskey}
    uvicorn.run(
        create_app(config),
        host=config.host,
        port=config.port,
        timeout_keep_alive=config.idle_timeout,
        log_config=None,
        **ssl,
    )
