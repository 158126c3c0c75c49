"""run_server / close_server against a live socket and an in-memory store."""
import socket
from unittest.mock import patch

import pytest
import requests

from api import server
from api.main import app, db_conn


def _free_port() -> int:
    with socket.socket() as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


@pytest.fixture
def live_server(seeded_db):
    port = _free_port()
    app.dependency_overrides[db_conn] = lambda: seeded_db
    with patch.object(server, "get_database", return_value=seeded_db) as get_db, \
            patch.object(server, "close_client") as close:
        server.run_server("mongodb://localhost/test-blog-app", port=port)
        try:
            yield f"http://127.0.0.1:{port}", get_db, close
        finally:
            server.close_server()
            app.dependency_overrides.clear()


def test_serves_requests_until_closed(live_server, posts):
    base, get_db, close = live_server

    res = requests.get(f"{base}/posts", timeout=5)

    assert res.status_code == 200
    assert len(res.json()["blogPosts"]) == posts.count()
    get_db.assert_called_once_with("mongodb://localhost/test-blog-app")
    close.assert_not_called()


def test_close_server_stops_listening_and_closes_client(seeded_db):
    port = _free_port()
    with patch.object(server, "get_database", return_value=seeded_db), \
            patch.object(server, "close_client") as close:
        server.run_server("mongodb://localhost/test-blog-app", port=port)
        server.close_server()

    close.assert_called_once()
    with pytest.raises(requests.ConnectionError):
        requests.get(f"http://127.0.0.1:{port}/posts", timeout=2)


def test_run_server_twice_fails(live_server):
    with pytest.raises(RuntimeError):
        server.run_server("mongodb://localhost/test-blog-app", port=_free_port())
