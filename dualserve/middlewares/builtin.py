"""Middleware the web server attaches to its root pipeline on its own."""

from __future__ import annotations

import json
import uuid
from typing import Any

from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response

from ..origin import CallNext

SESSION_ID_KEY = "id"


async def parse_body(request: Request, call_next: CallNext) -> Response:
    """
    Decode JSON and url-encoded bodies into ``request.state.body``.

    A url-encoded field sent more than once maps to the list of its values.
    Other content types leave ``request.state.body`` as None. A malformed
    JSON body is answered with 400 without reaching downstream handlers.
    """
    request.state.body = None
    content_type = request.headers.get("content-type", "").split(";")[0].strip()

    if content_type == "application/json":
        raw = await request.body()
        if raw:
            try:
                request.state.body = json.loads(raw)
            except ValueError:
                return PlainTextResponse("Malformed JSON body", status_code=400)
    elif content_type == "application/x-www-form-urlencoded":
        await request.body()
        form = await request.form()
        body: dict[str, Any] = {}
        for key in form:
            values = form.getlist(key)
            body[key] = values if len(values) > 1 else values[0]
        request.state.body = body

    return await call_next(request)


async def ensure_session_id(request: Request, call_next: CallNext) -> Response:
    """Give every new session an identifier so its cookie is always issued."""
    if SESSION_ID_KEY not in request.session:
        request.session[SESSION_ID_KEY] = uuid.uuid4().hex
    return await call_next(request)
