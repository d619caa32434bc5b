import mongomock
import pytest
import requests

from config import settings
from server import close_server, run_server


def _start():
    try:
        return run_server(settings.TEST_DATABASE_URL, port=0, host="127.0.0.1",
                          client_factory=mongomock.MongoClient)
    except (OSError, RuntimeError) as e:
        pytest.skip(f"cannot bind a local port here: {e}")


def test_independent_servers_start_and_stop():
    first = _start()
    second = _start()
    try:
        assert first.port != second.port
        assert first.gateway is not second.gateway
        for handle in (first, second):
            res = requests.get(f"{handle.base_url}/setlist", timeout=5)
            assert res.status_code == 200
            assert res.json() is None

        res = requests.post(f"{first.base_url}/track",
                            json={"track": {"trackName": "Green", "key": "G", "bpm": 145}}, timeout=5)
        assert res.status_code == 201
        # separate stores: the second server still has no setlist
        assert requests.get(f"{second.base_url}/setlist", timeout=5).json() is None
    finally:
        close_server(first)
        close_server(second)

    assert not first.thread.is_alive()
    assert not first.gateway.connected
    assert not second.gateway.connected


def test_unknown_route_over_the_wire():
    handle = _start()
    try:
        res = requests.delete(f"{handle.base_url}/nope", timeout=5)
        assert res.status_code == 404
        assert res.json() == {"message": "Not Found"}
    finally:
        close_server(handle)
