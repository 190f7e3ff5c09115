"""Shared builders and fakes for the test suite."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional

from jee_cbt.services.test_flow import TestSession

SUBJECT_CYCLE = ("Physics", "Chemistry", "Mathematics")


def question_payload(n: int, subject: Optional[str] = None) -> dict:
    return {
        "questionNumber": n,
        "question": f"Question {n}?",
        "optionA": f"{n}-A",
        "optionB": f"{n}-B",
        "optionC": f"{n}-C",
        "optionD": f"{n}-D",
        "subject": subject or SUBJECT_CYCLE[(n - 1) % len(SUBJECT_CYCLE)],
        "topic": "General",
    }


def questions_payload(count: int) -> list[dict]:
    return [question_payload(i) for i in range(1, count + 1)]


def solution_payload(n: int, correct: str = "A", final: str = "") -> dict:
    return {
        "questionNumber": n,
        "detailedSolution": f"Working for {n}",
        "correctOption": correct,
        "finalAnswer": final or f"answer {n}",
    }


@dataclass
class FakeTicker:
    """Manual ticker: ticks only when fire() is called."""

    on_tick: Callable[[], None]
    started: bool = False
    cancelled: bool = False
    joined: bool = False

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True

    def join(self, timeout: Optional[float] = None) -> None:
        self.joined = True

    def fire(self, times: int = 1) -> None:
        for _ in range(times):
            self.on_tick()


@dataclass
class FakeTickerFactory:
    tickers: list[FakeTicker] = field(default_factory=list)

    def __call__(self, on_tick: Callable[[], None]) -> FakeTicker:
        ticker = FakeTicker(on_tick)
        self.tickers.append(ticker)
        return ticker

    @property
    def last(self) -> FakeTicker:
        return self.tickers[-1]


def make_session(time_limit_s: int = 60) -> tuple[TestSession, FakeTickerFactory]:
    factory = FakeTickerFactory()
    return TestSession(time_limit_s=time_limit_s, ticker_factory=factory), factory


def started_session(
    count: int = 5,
    time_limit_s: int = 60,
    answer_key: Optional[dict] = None,
    solutions: Optional[list] = None,
) -> tuple[TestSession, FakeTickerFactory]:
    test, factory = make_session(time_limit_s)
    test.ingest_questions(questions_payload(count))
    if answer_key is not None:
        test.ingest_answer_key(answer_key)
    if solutions is not None:
        test.ingest_solutions(solutions)
    test.start_test()
    return test, factory
