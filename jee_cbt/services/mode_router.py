"""
services/mode_router.py

Decides which screen is active from state alone (never from navigation
history). Rules are checked in a fixed priority order; the first match wins.
So Analysis beats Solutions when both flags are set, and Solutions needs at
least one loaded solution.
"""

from enum import Enum

from pydantic import BaseModel

from jee_cbt.models.session_state import GenerationState, SessionState


class Mode(str, Enum):
    INGESTION = "ingestion"
    TOPIC_SELECTION = "topic_selection"
    PRE_TEST = "pre_test"
    ANALYSIS = "analysis"
    SOLUTIONS = "solutions"
    QUESTION_ANSWER = "question_answer"


class ScreenMode(BaseModel):
    """
    Active mode plus its sub-branch.

    graded:    ANALYSIS only; an answer key is loaded, so full results exist.
    read_only: QUESTION_ANSWER only, completed or in review.
    """

    mode: Mode
    graded: bool = False
    read_only: bool = False


def resolve_mode(state: SessionState, generation: GenerationState) -> ScreenMode:
    if not state.questions and not generation.show_topic_selection:
        return ScreenMode(mode=Mode.INGESTION)

    if generation.show_topic_selection:
        return ScreenMode(mode=Mode.TOPIC_SELECTION)

    if not state.test_started:
        return ScreenMode(mode=Mode.PRE_TEST)

    if state.show_analysis:
        return ScreenMode(mode=Mode.ANALYSIS, graded=bool(state.answer_key))

    if state.show_solutions and state.solutions:
        return ScreenMode(mode=Mode.SOLUTIONS)

    return ScreenMode(
        mode=Mode.QUESTION_ANSWER,
        read_only=state.test_completed or state.show_review,
    )
