"""
services/ingestion.py

Validation and normalization of uploaded/generated test content.
Public API:
  - load_json_payload(raw) -> object                 : bytes -> parsed JSON
  - parse_questions(payload) -> List[Question]       : question list
  - parse_answer_key(payload) -> Dict[str, str]      : answer key
  - parse_solutions(payload) -> Dict[str, Solution]  : solution list -> solution key

Design:
- Functions are pure: they either return normalized domain objects or raise.
  Applying the result to a session is TestSession's job, so a failed payload
  can never leave a session half-updated.
- Shape errors raise InvalidFormat; unreadable content raises IngestionFailed.
"""

import json
import logging
from collections.abc import Mapping
from typing import Dict, List

from pydantic import ValidationError

from jee_cbt.errors import IngestionFailed, InvalidFormat
from jee_cbt.models.question_model import OPTION_LETTERS, Question, Solution

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════════
# Public API
# ══════════════════════════════════════════════════════════════════════════════

def load_json_payload(raw: bytes) -> object:
    """
    Uploaded file bytes → parsed JSON value.
    A UTF-8 BOM is tolerated since some editors on Windows write one.
    """
    if not raw:
        raise IngestionFailed("The uploaded file is empty.")
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise IngestionFailed("The uploaded file is not UTF-8 text.") from e
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        logger.warning(f"load_json_payload: JSON decode failed — {e}")
        raise IngestionFailed("Failed to read the file. Please check the JSON format.") from e


def parse_questions(payload: object) -> List[Question]:
    """
    JSON array of question objects → Question list (order preserved).

    Raises:
        InvalidFormat: payload is not a non-empty list, an item does not
                       match the Question shape, or a questionNumber repeats.
    """
    items = _require_non_empty_list(payload, "question")

    questions: List[Question] = []
    seen: set[int] = set()
    for idx, item in enumerate(items):
        q = _validate_item(Question, item, idx, "question")
        if q.question_number in seen:
            raise InvalidFormat(f"Duplicate questionNumber {q.question_number} at item {idx}.")
        seen.add(q.question_number)
        questions.append(q)

    logger.info(f"parse_questions: {len(questions)} questions")
    return questions


def parse_answer_key(payload: object) -> Dict[str, str]:
    """
    JSON object {questionNumber: letter} → answer key.

    Keys are stringified (a key of 1 and "1" are the same question).
    Values must be one of A-D; lower case is accepted and stored upper case.
    An empty object is allowed and means "no answer key".
    """
    if not isinstance(payload, Mapping):
        raise InvalidFormat("Invalid answer key format: expected a JSON object.")

    answer_key: Dict[str, str] = {}
    for raw_key, raw_value in payload.items():
        key = str(raw_key).strip()
        if not key:
            raise InvalidFormat("Invalid answer key format: empty question number.")
        if not isinstance(raw_value, str) or raw_value.strip().upper() not in OPTION_LETTERS:
            raise InvalidFormat(
                f"Invalid answer key format: answer for question {key} must be one of A-D, got {raw_value!r}."
            )
        answer_key[key] = raw_value.strip().upper()

    logger.info(f"parse_answer_key: {len(answer_key)} answers")
    return answer_key


def parse_solutions(payload: object) -> Dict[str, Solution]:
    """
    JSON array of solution objects → solution key indexed by str(questionNumber).

    A repeated questionNumber overwrites the earlier entry (last one wins).
    """
    items = _require_non_empty_list(payload, "solution")

    solution_key: Dict[str, Solution] = {}
    for idx, item in enumerate(items):
        sol = _validate_item(Solution, item, idx, "solution")
        key = str(sol.question_number)
        if key in solution_key:
            logger.debug(f"parse_solutions: question {key} repeated, keeping the later one")
        solution_key[key] = sol

    logger.info(f"parse_solutions: {len(items)} solutions → {len(solution_key)} keys")
    return solution_key


# ══════════════════════════════════════════════════════════════════════════════
# Helpers
# ══════════════════════════════════════════════════════════════════════════════

def _require_non_empty_list(payload: object, kind: str) -> list:
    if not isinstance(payload, list) or not payload:
        raise InvalidFormat(f"Invalid {kind} format: expected a non-empty JSON array.")
    return payload


def _validate_item(model, item: object, idx: int, kind: str):
    if not isinstance(item, Mapping):
        raise InvalidFormat(f"Invalid {kind} format: item {idx} is not an object.")
    try:
        return model.model_validate(item)
    except ValidationError as e:
        logger.warning(f"{kind} item[{idx}] rejected — {e.error_count()} error(s)")
        raise InvalidFormat(f"Invalid {kind} format: item {idx} — {_first_error(e)}") from e


def _first_error(e: ValidationError) -> str:
    err = e.errors()[0]
    loc = ".".join(str(p) for p in err.get("loc", ()))
    return f"{loc}: {err.get('msg', 'invalid')}" if loc else err.get("msg", "invalid")
