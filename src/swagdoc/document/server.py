"""FastAPI application serving the document and dispatching registered endpoints."""

import inspect
import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from swagdoc.document.api import API
from swagdoc.document.base import Endpoints, Method

logger = logging.getLogger(__name__)


def request_scheme(request: Request) -> str:
    """X-Forwarded-Proto, then the request URL scheme (https under TLS), defaulting to http."""
    forwarded = request.headers.get("x-forwarded-proto")
    if forwarded:
        return forwarded
    return request.url.scheme or "http"


def request_host(request: Request) -> str:
    return request.headers.get("host") or request.url.netloc


def document_handler(api: API):
    """Serve the document as JSON with host and scheme taken from the request."""
    async def handler(request: Request) -> JSONResponse:
        doc = api.clone()
        doc.host = request_host(request)
        doc.schemes = [request_scheme(request)]
        return JSONResponse(doc.to_dict())
    return handler


def route_table(api: API) -> dict[str, Endpoints]:
    """Map each base-path-joined path to the endpoints registered under it."""
    return {api.full_path(raw_path): endpoints for raw_path, endpoints in api.paths.items()}


async def dispatch(endpoints: Endpoints | None, request: Request) -> Any:
    """Call the handler registered for the request method."""
    endpoint = endpoints.lookup(request.method) if endpoints is not None else None
    if endpoint is None or endpoint.handler is None:
        return PlainTextResponse("Not Found", status_code=404)
    if not callable(endpoint.handler):
        logger.error("handler of %s %s is not callable", endpoint.method, endpoint.path)
        return PlainTextResponse("Handler is not a callable request handler", status_code=500)
    result = endpoint.handler(request)
    if inspect.isawaitable(result):
        result = await result
    return result


def make_app(api: API, url: str = "/swagger.json") -> FastAPI:
    """Serve the document at ``url`` and the registered endpoints at their advertised paths."""
    app = FastAPI(openapi_url=None, docs_url=None, redoc_url=None)
    app.add_api_route(url, document_handler(api), methods=["GET"], include_in_schema=False)

    @app.api_route("/{path:path}", methods=[m.value for m in Method], include_in_schema=False, response_model=None)
    async def endpoints(request: Request):
        return await dispatch(route_table(api).get(request.url.path), request)

    return app
