from __future__ import annotations

import logging
import threading

from ledger.api_client import ApiResponse
from ledger.parallel import gather


def test_gather_returns_one_result_per_call():
    results = gather({
        "updates": lambda: ApiResponse.ok(["u1"]),
        "photos": lambda: ApiResponse.fail("HTTP 500: boom"),
    })
    assert results["updates"].data == ["u1"]
    assert results["photos"].error == "HTTP 500: boom"


def test_raising_call_does_not_hide_the_others(caplog):
    def explode():
        raise RuntimeError("socket closed")

    with caplog.at_level(logging.ERROR, logger="ledger"):
        results = gather({"photos": explode, "updates": lambda: ApiResponse.ok([])})

    assert results["updates"].success
    assert not results["photos"].success
    assert results["photos"].error == "socket closed"
    assert "photos" in caplog.text


def test_calls_run_concurrently():
    barrier = threading.Barrier(2, timeout=5)

    def wait_for_peer():
        barrier.wait()
        return ApiResponse.ok(True)

    results = gather({"a": wait_for_peer, "b": wait_for_peer})
    assert results["a"].success and results["b"].success


def test_empty_input():
    assert gather({}) == {}
