"""
HTTP server for embedded filesystems.

Serves an :class:`~fsembed.runtime.Fs` read-only over HTTP: files are
returned as-is, directories return their ``index.html`` when one is
embedded and a JSON listing otherwise.

Usage:
    fsembed serve myapp.assets:Assets          # localhost:8000
    fsembed serve myapp.assets:Assets -p 3000  # Custom port
"""

from __future__ import annotations

import asyncio
import mimetypes
from datetime import datetime
from email.utils import format_datetime

from fastapi import FastAPI, HTTPException
from fastapi.responses import Response
from pydantic import BaseModel

from fsembed.errors import DecodeError, NotFoundError
from fsembed.runtime import File, Fs

INDEX_FILE = "index.html"


# =============================================================================
# Response Models
# =============================================================================


class EntryModel(BaseModel):
    """One entry of a directory listing."""

    name: str
    path: str
    size: int
    is_dir: bool
    mod_time: datetime

    @classmethod
    def from_file(cls, file: File) -> "EntryModel":
        return cls(
            name=file.name,
            path=file.path or "/",
            size=file.size,
            is_dir=file.is_dir,
            mod_time=file.mod_time,
        )


class DirectoryListing(BaseModel):
    """Listing returned for directories without an index page."""

    path: str
    entries: list[EntryModel]


# =============================================================================
# FastAPI App
# =============================================================================


def to_virtual(url_path: str) -> str:
    """Map a request path onto a virtual path."""
    stripped = url_path.strip("/")
    return "/" + stripped if stripped else "/"


def create_app(fs: Fs, title: str = "fsembed") -> FastAPI:
    """
    Build an app serving ``fs``.

    Args:
        fs: Embedded filesystem
        title: OpenAPI title

    Returns:
        FastAPI application
    """
    app = FastAPI(title=title, description="Embedded files", docs_url=None, redoc_url=None)

    def file_response(file: File) -> Response:
        try:
            with fs.open(file.path or "/") as handle:
                content = handle.read()
        except DecodeError as e:
            raise HTTPException(status_code=500, detail=f"Corrupt embedded file: {file.path}") from e

        media_type, _ = mimetypes.guess_type(file.name)
        return Response(
            content=content,
            media_type=media_type or "application/octet-stream",
            headers={"Last-Modified": format_datetime(file.mod_time, usegmt=True)},
        )

    def respond(path: str):
        try:
            handle = fs.open(path)
        except NotFoundError as e:
            raise HTTPException(status_code=404, detail=f"Not found: {path}") from e

        with handle:
            info = handle.stat()
            if not info.is_dir:
                return file_response(info)

            index_path = path.rstrip("/") + "/" + INDEX_FILE
            if index_path in fs:
                return file_response(fs[index_path])

            return DirectoryListing(
                path=path,
                entries=[EntryModel.from_file(f) for f in handle.readdir(0)],
            )

    @app.get("/{url_path:path}", response_model=None)
    async def get_path(url_path: str):
        """Serve a file, an index page, or a directory listing."""
        # First reads decompress; keep them off the event loop
        return await asyncio.to_thread(respond, to_virtual(url_path))

    return app


def run_server(fs: Fs, host: str = "127.0.0.1", port: int = 8000, title: str = "fsembed") -> None:
    """
    Serve ``fs`` until interrupted.

    Args:
        fs: Embedded filesystem
        host: Host to bind to
        port: Port to bind to
        title: OpenAPI title
    """
    import uvicorn

    app = create_app(fs, title=title)

    print(f"Serving {len(fs)} entries at http://{host}:{port}")
    print("Press Ctrl+C to stop")

    uvicorn.run(app, host=host, port=port, log_level="warning")
