from __future__ import annotations

from collections.abc import Callable, Coroutine
from typing import Any

from fastapi import APIRouter, Request, Response
from fastapi.responses import PlainTextResponse
from fastapi.routing import APIRoute

from intro.observability.metrics import get_metrics


class LoginTimedRoute(APIRoute):
    """Times the full route handler (parsing, endpoint, serialization) into the login summary."""

    def get_route_handler(self) -> Callable[[Request], Coroutine[Any, Any, Response]]:
        handler = super().get_route_handler()

        async def timed_handler(request: Request) -> Response:
            with get_metrics().time_login():
                return await handler(request)

        return timed_handler


router = APIRouter(tags=["login"], route_class=LoginTimedRoute)


@router.get("/login", response_class=PlainTextResponse)
async def login() -> PlainTextResponse:
    # No credentials are checked.
    return PlainTextResponse("Welcome to the Intro App!")
