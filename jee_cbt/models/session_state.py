"""
models/session_state.py

State record of a single test attempt, plus the transient generation intent.
Pydantic BaseModel based; no UI code and no behaviour. All mutation goes
through services/test_flow.TestSession.
"""

from typing import Dict, List, Set

from pydantic import BaseModel, Field

from config import DEFAULT_QUESTION_COUNT, DEFAULT_TIME_LIMIT_SECONDS
from jee_cbt.models.question_model import Question, Solution


class SessionState(BaseModel):
    """
    Everything the test flow knows about the current attempt.

    Attributes:
        questions:              Loaded questions, in presentation order.
        answer_key:             Authoritative key. {str(questionNumber): letter}. May be empty.
        solutions:              Solution key. {str(questionNumber): Solution}. May be empty.
        user_answers:           Student's answers. {str(questionNumber): letter}
        current_question_index: Index of the displayed question (0-based).
        test_started:           Countdown has been armed.
        test_completed:         Submitted or expired. Answers are frozen.
        time_remaining_seconds: Countdown value, never negative.
        show_analysis:          Analysis screen requested.
        show_solutions:         Solutions overlay requested.
        show_review:            Read-only review of questions requested.
    """

    questions: List[Question] = Field(default_factory=list)
    answer_key: Dict[str, str] = Field(default_factory=dict)
    solutions: Dict[str, Solution] = Field(default_factory=dict)
    user_answers: Dict[str, str] = Field(default_factory=dict)
    current_question_index: int = Field(default=0, ge=0)
    test_started: bool = False
    test_completed: bool = False
    time_remaining_seconds: int = Field(default=DEFAULT_TIME_LIMIT_SECONDS, ge=0)
    show_analysis: bool = False
    show_solutions: bool = False
    show_review: bool = False

    @property
    def has_questions(self) -> bool:
        return bool(self.questions)

    @property
    def current_question(self) -> Question:
        return self.questions[self.current_question_index]

    @property
    def read_only(self) -> bool:
        """Answers can no longer be changed."""
        return self.test_completed or self.show_review


class GenerationState(BaseModel):
    """
    Topic-selection / generation intent. Lives beside SessionState and is
    thrown away once a generated test has been loaded.
    """

    is_generating: bool = False
    selected_topics: Set[str] = Field(default_factory=set)
    number_of_questions: int = DEFAULT_QUESTION_COUNT
    show_topic_selection: bool = False
