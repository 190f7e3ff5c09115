"""
api/app.py — FastAPI app instance + session middleware + static file serving
"""

import logging
import os
import threading
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from config import SESSION_CLEANUP_INTERVAL, STATIC_DIR
from api.routes import router
import api.session as session

SESSION_COOKIE = "jee_session"

logger = logging.getLogger(__name__)


def _start_cleanup_loop() -> threading.Event:
    """Drop expired sessions every SESSION_CLEANUP_INTERVAL seconds until the event is set."""
    stop = threading.Event()

    def _cleanup_loop():
        while not stop.wait(SESSION_CLEANUP_INTERVAL):
            removed = session.cleanup_expired()
            if removed:
                logger.info(f"Cleaned up {removed} expired session(s)")

    t = threading.Thread(target=_cleanup_loop, name="session-cleanup", daemon=True)
    t.start()
    return stop


@asynccontextmanager
async def _lifespan(app: FastAPI):
    stop = _start_cleanup_loop()
    try:
        yield
    finally:
        stop.set()
        session.clear_all()


def create_app() -> FastAPI:
    app = FastAPI(title="JEE CBT Practice Test", docs_url=None, redoc_url=None, lifespan=_lifespan)

    # CORS (allow mobile browsers and other origins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Session middleware: read the session ID from the cookie, issue a new one if absent
    @app.middleware("http")
    async def session_middleware(request: Request, call_next):
        sid = request.cookies.get(SESSION_COOKIE)
        if not sid or session.get_session(sid) is None:
            sid = session.create_session()

        request.state.session_id = sid
        response: Response = await call_next(request)
        response.set_cookie(
            key=SESSION_COOKIE,
            value=sid,
            httponly=True,
            samesite="lax",
            max_age=session.SESSION_TTL,
        )
        return response

    app.include_router(router)

    # Static files
    if os.path.isdir(STATIC_DIR):
        app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

    # Root → index.html
    @app.get("/")
    async def serve_index():
        index_path = os.path.join(STATIC_DIR, "index.html")
        if os.path.exists(index_path):
            return FileResponse(index_path)
        return {"error": "index.html not found"}

    return app
