"""
aiohttp application wiring for the load test API.
"""

from typing import Optional

from aiohttp import web

from api.handler import Handler
from configuration import (
    CORS_ALLOW_HEADERS,
    CORS_ALLOW_METHODS,
    CORS_ALLOW_ORIGIN,
    TEST_ROUTE,
)


def _add_cors_headers(response: web.StreamResponse) -> None:
    response.headers["Access-Control-Allow-Origin"] = CORS_ALLOW_ORIGIN
    response.headers["Access-Control-Allow-Methods"] = CORS_ALLOW_METHODS
    response.headers["Access-Control-Allow-Headers"] = CORS_ALLOW_HEADERS


@web.middleware
async def cors_middleware(request: web.Request, handler):
    """Allow cross-origin access from any origin; answer preflight requests directly."""
    if request.method == "OPTIONS":
        response = web.Response(status=200)
        _add_cors_headers(response)
        return response

    try:
        response = await handler(request)
    except web.HTTPException as e:
        _add_cors_headers(e)
        raise

    _add_cors_headers(response)
    return response


def create_app(handler: Optional[Handler] = None) -> web.Application:
    """Build the web application with its routes and middleware."""
    handler = handler or Handler()
    app = web.Application(middlewares=[cors_middleware])
    app.router.add_post(TEST_ROUTE, handler.post_test)
    return app
