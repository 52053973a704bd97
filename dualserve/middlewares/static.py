"""Middleware serving static files (css, js, ...)."""

from __future__ import annotations

from pathlib import Path

from starlette.exceptions import HTTPException
from starlette.requests import Request
from starlette.responses import Response
from starlette.staticfiles import StaticFiles

from ..origin import CallNext
from .middleware import Middleware


class StaticMiddleware(Middleware):
    """
    Serves files found under a base directory.

    Requests for missing files, and requests other than GET/HEAD, continue
    down the pipeline.
    """

    __slots__ = ("_path",)

    def __init__(self, path: str | Path) -> None:
        """
        Args:
            path: Base directory to search requested files in
        """
        self._path = Path(path)
        files = StaticFiles(directory=self._path, check_dir=False)

        async def serve_static(request: Request, call_next: CallNext) -> Response:
            if request.method not in ("GET", "HEAD"):
                return await call_next(request)
            try:
                return await files.get_response(files.get_path(request.scope), request.scope)
            except HTTPException as e:
                if e.status_code == 404:
                    return await call_next(request)
                raise

        super().__init__(serve_static)

    @property
    def path(self) -> Path:
        """Base directory of served files."""
        return self._path
