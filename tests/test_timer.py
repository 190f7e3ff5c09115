"""Tests for the background ``Ticker`` and ``format_time``."""

from __future__ import annotations

import threading
import time

import pytest

from jee_cbt.services.timer import Ticker, format_time


@pytest.mark.parametrize(
    "seconds, expected",
    [
        (0, "00:00:00"),
        (59, "00:00:59"),
        (60, "00:01:00"),
        (3661, "01:01:01"),
        (10800, "03:00:00"),
        (90000, "25:00:00"),
        (-5, "00:00:00"),
    ],
)
def test_format_time(seconds: int, expected: str) -> None:
    assert format_time(seconds) == expected


def test_ticker_ticks_until_cancelled() -> None:
    count = 0
    reached = threading.Event()

    def on_tick() -> None:
        nonlocal count
        count += 1
        if count >= 3:
            reached.set()

    ticker = Ticker(on_tick, interval=0.01)
    ticker.start()
    assert reached.wait(2.0)

    ticker.cancel()
    ticker.join()
    settled = count
    time.sleep(0.05)
    assert count == settled


def test_ticker_can_be_cancelled_from_its_own_callback() -> None:
    calls = []
    ticker: Ticker

    def on_tick() -> None:
        calls.append(1)
        ticker.cancel()
        ticker.join()  # joining itself must not raise

    ticker = Ticker(on_tick, interval=0.01)
    ticker.start()
    deadline = time.monotonic() + 2.0
    while not calls and time.monotonic() < deadline:
        time.sleep(0.01)
    ticker.join()
    time.sleep(0.05)
    assert calls == [1]


def test_ticker_stops_after_callback_error() -> None:
    calls = []

    def on_tick() -> None:
        calls.append(1)
        raise RuntimeError("boom")

    ticker = Ticker(on_tick, interval=0.01)
    ticker.start()
    deadline = time.monotonic() + 2.0
    while not calls and time.monotonic() < deadline:
        time.sleep(0.01)
    ticker.join()
    time.sleep(0.05)
    assert calls == [1]
