"""Start and stop the API against a given database.

Usage:
    python -m api.server

``run_server`` serves in a background thread and returns once the socket is
listening, so tests and scripts can drive a live server; ``close_server``
shuts it down and closes the MongoDB client.
"""
import logging
import threading
import time
from typing import Optional

import uvicorn

from blog_mongodb import config
from blog_mongodb.connect_db import close_client, get_database

from api.main import app

logger = logging.getLogger(__name__)

_server: Optional[uvicorn.Server] = None
_thread: Optional[threading.Thread] = None


class _ThreadedServer(uvicorn.Server):
    def install_signal_handlers(self):
        # signals belong to the main thread
        pass


def run_server(database_url: str = config.DATABASE_URL, port: int = config.PORT,
               host: str = "127.0.0.1", timeout: float = 10.0) -> uvicorn.Server:
    global _server, _thread
    if _server is not None:
        raise RuntimeError("Server already running")

    get_database(database_url)

    server = _ThreadedServer(uvicorn.Config(app, host=host, port=port, log_level=config.LOG_LEVEL.lower()))
    thread = threading.Thread(target=server.run, name="api-server", daemon=True)
    thread.start()

    deadline = time.monotonic() + timeout
    while not server.started:
        if not thread.is_alive() or time.monotonic() > deadline:
            server.should_exit = True
            thread.join(timeout)
            close_client()
            raise RuntimeError(f"Server failed to start on {host}:{port}")
        time.sleep(0.05)

    _server, _thread = server, thread
    logger.info("Your app is listening on port %d", port)
    return server


def close_server(timeout: float = 10.0) -> None:
    global _server, _thread
    if _server is not None:
        logger.info("Closing server")
        _server.should_exit = True
        _thread.join(timeout)
        _server, _thread = None, None
    close_client()


def main():
    config.configure_logging()
    get_database(config.DATABASE_URL)
    try:
        uvicorn.run(app, host="0.0.0.0", port=config.PORT, log_level=config.LOG_LEVEL.lower())
    finally:
        close_client()


if __name__ == "__main__":
    main()
