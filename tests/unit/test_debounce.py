from __future__ import annotations

import threading
import time

from cellmark.services.debounce import SearchDebouncer


def test_flush_runs_latest_value_once():
    seen: list[str] = []
    deb = SearchDebouncer(10.0, seen.append)
    deb.submit("w")
    deb.submit("wi")
    deb.submit("wid")
    assert deb.pending
    assert deb.flush() is True
    assert seen == ["wid"]
    assert not deb.pending
    assert deb.flush() is False
    assert seen == ["wid"]


def test_cancel_drops_pending_value():
    seen: list[str] = []
    deb = SearchDebouncer(10.0, seen.append)
    deb.submit("x")
    deb.cancel()
    assert not deb.pending
    assert deb.flush() is False
    assert seen == []


def test_timer_fires_once_after_burst():
    seen: list[str] = []
    done = threading.Event()

    def callback(value: str) -> None:
        seen.append(value)
        done.set()

    deb = SearchDebouncer(0.05, callback)
    for text in ("a", "ab", "abc"):
        deb.submit(text)
    assert done.wait(2.0)
    # give any superseded timer a chance to (wrongly) fire
    time.sleep(0.1)
    assert seen == ["abc"]
    assert not deb.pending
