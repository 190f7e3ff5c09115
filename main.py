"""
main.py — JEE CBT practice test launcher

Serves the API on DEFAULT_PORT (a free port when that one is taken) and
opens the test page in the default browser once the server answers.
uvicorn runs in the main thread so Ctrl+C shuts down through the app
lifespan and every running countdown is torn down.
"""

import logging
import socket
import sys
import threading
import time
import webbrowser

import uvicorn

from api.app import create_app
from config import DEFAULT_HOST, DEFAULT_PORT, LOG_FILE, OPEN_BROWSER

logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    try:
        logging.basicConfig(
            level=logging.INFO,
            format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
            handlers=[
                logging.FileHandler(LOG_FILE, encoding='utf-8'),
                logging.StreamHandler(sys.stdout)
            ]
        )
    except PermissionError:
        # log file locked by another process: console only
        logging.basicConfig(level=logging.INFO)


def _port_available(port: int) -> bool:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        try:
            s.bind((DEFAULT_HOST, port))
        except OSError:
            return False
        return True


def _choose_port() -> int:
    if _port_available(DEFAULT_PORT):
        return DEFAULT_PORT
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind((DEFAULT_HOST, 0))
        port = s.getsockname()[1]
    logger.warning(f"Port {DEFAULT_PORT} is in use, falling back to {port}")
    return port


def _open_when_ready(url: str, port: int, timeout: float = 15.0) -> None:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        try:
            with socket.create_connection((DEFAULT_HOST, port), timeout=0.5):
                break
        except OSError:
            time.sleep(0.1)
    else:
        logger.error(f"Server did not answer on {url} within {timeout:.0f}s")
        return
    logger.info(f"Server ready, opening {url}")
    webbrowser.open(url)


def main() -> None:
    _configure_logging()
    port = _choose_port()
    url = f"http://{DEFAULT_HOST}:{port}"
    logger.info(f"=== JEE CBT Practice Test on {url} ===")

    if OPEN_BROWSER:
        threading.Thread(target=_open_when_ready, args=(url, port), daemon=True).start()

    uvicorn.run(create_app(), host=DEFAULT_HOST, port=port, log_level="info")


if __name__ == "__main__":
    main()
