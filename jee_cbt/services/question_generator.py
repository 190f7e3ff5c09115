"""
services/question_generator.py

JEE question generation via the OpenAI Chat API.
Public API:
  - QuestionGenerator (Protocol)                       : what TestSession.generate() calls
  - OpenAIQuestionGenerator(api_key).generate(...)     : topics + count -> GeneratedTest

Design:
- One JSON-mode chat call returns questions, answer key and solutions together.
- The response goes through the same validators as uploaded files
  (services/ingestion), so a generated test obeys the same invariants.
- Transient API errors are retried with exponential backoff; every final
  failure becomes GenerationFailed.
"""

import json
import logging
import re
import time
from typing import Dict, List, Optional, Protocol, Sequence

from openai import APIError, OpenAI, RateLimitError
from pydantic import BaseModel, Field

from config import MODEL_NAME
from jee_cbt.data.topics import Topic
from jee_cbt.errors import GenerationFailed, InvalidFormat
from jee_cbt.models.question_model import Question, Solution
from jee_cbt.services.ingestion import parse_answer_key, parse_questions, parse_solutions

logger = logging.getLogger(__name__)

# ── Constants ─────────────────────────────────────────────────────────────────
_MAX_API_RETRIES = 3
_BACKOFF_BASE = 1.0
_RATE_LIMIT_MAX_RETRIES = 5
_RATE_LIMIT_BACKOFF_BASE = 2.0


class GeneratedTest(BaseModel):
    """Validated output of a generator."""

    questions: List[Question]
    answer_key: Dict[str, str] = Field(default_factory=dict)
    solutions: Dict[str, Solution] = Field(default_factory=dict)


class QuestionGenerator(Protocol):
    def generate(self, topics: Sequence[Topic], number_of_questions: int) -> GeneratedTest:
        """Return a validated test or raise GenerationFailed."""
        ...


# ══════════════════════════════════════════════════════════════════════════════
# OpenAI generator
# ══════════════════════════════════════════════════════════════════════════════

class OpenAIQuestionGenerator:
    """Generator backed by an OpenAI chat model in JSON mode."""

    def __init__(self, api_key: str, model: str = MODEL_NAME, client: Optional[OpenAI] = None):
        if client is None:
            if not api_key:
                raise GenerationFailed("OpenAI API key is not set.")
            client = OpenAI(api_key=api_key)
        self._client = client
        self._model = model

    def generate(self, topics: Sequence[Topic], number_of_questions: int) -> GeneratedTest:
        if not topics:
            raise GenerationFailed("No topics selected.")
        if number_of_questions <= 0:
            raise GenerationFailed("Number of questions must be positive.")

        logger.info(
            f"generate: {number_of_questions} questions, topics={[t.id for t in topics]}"
        )
        system_prompt = _build_generation_system_prompt()
        user_input = _build_generation_user_prompt(topics, number_of_questions)

        raw = _call_openai(system_prompt, user_input, self._client, self._model)
        if raw is None:
            raise GenerationFailed("AI service error. Please try again shortly.")

        try:
            return parse_generated_test(raw)
        except GenerationFailed:
            logger.warning("generate: unusable response, retrying once with stricter prompt")

        raw = _call_openai(
            system_prompt + "\n\nReturn ONLY a valid JSON object. No markdown.",
            user_input, self._client, self._model,
        )
        if raw is None:
            raise GenerationFailed("AI service error. Please try again shortly.")
        return parse_generated_test(raw)


def parse_generated_test(raw_response: str) -> GeneratedTest:
    """
    LLM JSON → GeneratedTest.

    Expected shape:
        {"questions": [...], "answerKey": {...}, "solutions": [...]}
    answerKey is optional when solutions carry correctOption; solutions are optional.
    """
    cleaned = _clean_json_response(raw_response)
    if not cleaned:
        raise GenerationFailed("Generator returned no JSON.")
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise GenerationFailed("Generator returned malformed JSON.") from e
    if not isinstance(data, dict):
        raise GenerationFailed("Generator returned an unexpected JSON shape.")

    try:
        questions = parse_questions(data.get("questions"))
        raw_solutions = data.get("solutions")
        solutions = parse_solutions(raw_solutions) if raw_solutions else {}
        raw_key = data.get("answerKey")
        if raw_key:
            answer_key = parse_answer_key(raw_key)
        else:
            answer_key = {k: s.correct_option for k, s in solutions.items()}
    except InvalidFormat as e:
        raise GenerationFailed(f"Generator returned unusable data: {e}") from e

    return GeneratedTest(questions=questions, answer_key=answer_key, solutions=solutions)


# ══════════════════════════════════════════════════════════════════════════════
# Prompts
# ══════════════════════════════════════════════════════════════════════════════

def _build_generation_system_prompt() -> str:
    return (
        "You are an expert JEE (Main/Advanced) question setter.\n"
        "\n"
        "[Task]\n"
        "Write original single-correct multiple-choice questions at JEE level for the given topics.\n"
        "\n"
        "[Output format]\n"
        'Respond ONLY with a JSON object of the form {"questions": [...], "answerKey": {...}, "solutions": [...]}.\n'
        "No markdown, no commentary.\n"
        "\n"
        "[Question object]\n"
        "{\n"
        '  "questionNumber": (int) 1-based, consecutive,\n'
        '  "question": (str) question text,\n'
        '  "optionA": (str), "optionB": (str), "optionC": (str), "optionD": (str),\n'
        '  "subject": (str) exactly one of "Physics", "Chemistry", "Mathematics",\n'
        '  "topic": (str) topic name as given\n'
        "}\n"
        "\n"
        "[answerKey]\n"
        'Object mapping questionNumber as a string to the correct letter, e.g. {"1": "C"}.\n'
        "\n"
        "[Solution object]\n"
        "{\n"
        '  "questionNumber": (int),\n'
        '  "detailedSolution": (str) step-by-step working,\n'
        '  "correctOption": (str) one of "A", "B", "C", "D",\n'
        '  "finalAnswer": (str) the final value or statement\n'
        "}\n"
        "\n"
        "[Rules]\n"
        "1. Exactly one option is correct.\n"
        "2. Spread questions evenly across the given topics.\n"
        "3. answerKey and correctOption must agree.\n"
        "4. Use plain text for formulas (e.g. v^2 = u^2 + 2as)."
    )


def _build_generation_user_prompt(topics: Sequence[Topic], number_of_questions: int) -> str:
    lines = [f"- {t.name} ({t.subject})" for t in topics]
    return (
        f"Generate {number_of_questions} questions covering these topics:\n"
        + "\n".join(lines)
    )


# ══════════════════════════════════════════════════════════════════════════════
# Shared utilities
# ══════════════════════════════════════════════════════════════════════════════

def _clean_json_response(response_text: str) -> str:
    """Extract the bare JSON from an LLM reply."""
    if not response_text:
        return ""

    text = re.sub(r"```(?:json)?\s*", "", response_text, flags=re.IGNORECASE)
    text = re.sub(r"```", "", text)
    text = text.strip()

    if text.startswith("{") or text.startswith("["):
        return text

    match = re.search(r"[{[].*[}\]]", text, re.DOTALL)
    if match:
        return match.group(0).strip()

    return ""


def _call_openai(
    system_prompt: str,
    user_content: str,
    client: OpenAI,
    model: str = MODEL_NAME,
    max_retries: int = _MAX_API_RETRIES,
) -> Optional[str]:
    """OpenAI Chat API call with exponential backoff. Returns None on final failure."""
    last_exception: Optional[Exception] = None
    effective_retries = max_retries

    attempt = 0
    while attempt < effective_retries:
        attempt += 1
        try:
            response = client.chat.completions.create(
                model=model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_content},
                ],
                temperature=0.7,
                response_format={"type": "json_object"},
                max_tokens=16384,
            )
            return response.choices[0].message.content
        except RateLimitError as e:
            last_exception = e
            effective_retries = _RATE_LIMIT_MAX_RETRIES
            if attempt < effective_retries:
                wait = _RATE_LIMIT_BACKOFF_BASE * (2 ** (attempt - 1))
                logger.warning(f"Rate limit, retrying in {wait:.1f}s ({attempt}/{effective_retries})")
                time.sleep(wait)
            else:
                logger.error("Rate limit: retries exhausted.")
                break
        except APIError as e:
            last_exception = e
            error_str = str(e).lower()
            is_transient = any(k in error_str for k in ("timeout", "connection", "unavailable"))
            if getattr(e, "status_code", None) in (500, 502, 503, 504):
                is_transient = True
            if attempt < effective_retries and is_transient:
                wait = _BACKOFF_BASE * (2 ** (attempt - 1))
                logger.warning(f"API error, retrying in {wait:.1f}s ({attempt}/{effective_retries})")
                time.sleep(wait)
            else:
                logger.error(f"API error: {e}")
                break

    logger.error(f"OpenAI call failed: {last_exception}")
    return None
