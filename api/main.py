from __future__ import annotations

import asyncio
import logging
import signal
import socket
from typing import Sequence

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from chunks.repository import ChunkModel
from chunks.router import build_router
from core import config, db
from core.context import Application
from core.log import fatal, new_error_logger, new_info_logger


def routes(app: Application) -> FastAPI:
    """
    Build a new FastAPI instance wired to `app`.

    Every call returns a fresh route table; there is no module-level app for
    other imports to register handlers on.
    """
    api = FastAPI(title="chunkbox")
    api.state.application = app

    @api.middleware("http")
    async def server_error(request: Request, call_next):
        # Anything a handler did not turn into an HTTP response.
        try:
            return await call_next(request)
        except Exception as exc:
            app.error_log.error(
                "%s %s: %s", request.method, request.url.path, exc, exc_info=exc
            )
            return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})

    @api.get("/health", name="health")
    def health() -> dict:
        return {"status": "ok"}

    api.include_router(build_router(app), tags=["chunks"])
    return api


def bind(addr: str) -> socket.socket:
    host, port = config.split_addr(addr)
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, port))
        sock.listen(128)
    except OSError:
        sock.close()
        raise
    sock.set_inheritable(True)
    return sock


def new_server(api: FastAPI, error_log: logging.Logger) -> uvicorn.Server:
    # Server-level problems go to the application's error log.
    uvicorn_error = logging.getLogger("uvicorn.error")
    uvicorn_error.handlers = list(error_log.handlers)
    uvicorn_error.setLevel(logging.ERROR)
    uvicorn_error.propagate = False
    server_config = uvicorn.Config(api, log_config=None, access_log=False)
    return uvicorn.Server(server_config)


async def run(settings: config.Settings, info_log: logging.Logger, error_log: logging.Logger) -> None:
    try:
        pool = await db.open_pool(settings.dsn)
    except Exception as e:
        fatal(error_log, e)

    try:
        app = Application(
            info_log=info_log,
            error_log=error_log,
            chunks=ChunkModel(pool),
        )
        api = routes(app)

        try:
            sock = bind(settings.addr)
        except (OSError, ValueError) as e:
            fatal(error_log, e)

        server = new_server(api, error_log)
        info_log.info("Starting server on %s", settings.addr)
        try:
            await server.serve(sockets=[sock])
        except Exception as e:
            fatal(error_log, e)
        finally:
            sock.close()
    finally:
        # Best effort: still runs when SystemExit unwinds the stack, never
        # runs if the process is killed.
        await db.close_pool(pool)


def _interrupt(signum, frame):
    raise KeyboardInterrupt


def main(argv: Sequence[str] | None = None) -> int:
    settings = config.parse_args(argv)
    info_log = new_info_logger()
    error_log = new_error_logger()
    # uvicorn re-raises SIGTERM after serve() returns; surface it as
    # KeyboardInterrupt so run() still unwinds and closes the pool.
    previous = signal.signal(signal.SIGTERM, _interrupt)
    try:
        asyncio.run(run(settings, info_log, error_log))
    except KeyboardInterrupt:
        pass
    finally:
        signal.signal(signal.SIGTERM, previous)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
