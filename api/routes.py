"""
api/routes.py — FastAPI endpoints
"""

import asyncio
import logging
from typing import Callable

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile
from pydantic import BaseModel

import api.session as session
from api.sample_questions import SAMPLE_ANSWER_KEY, SAMPLE_QUESTIONS, SAMPLE_SOLUTIONS
from config import MAX_UPLOAD_SIZE, QUESTION_COUNT_CHOICES
from jee_cbt.data.topics import topics_by_subject
from jee_cbt.errors import (
    GenerationFailed,
    IngestionFailed,
    InvalidFormat,
    InvalidTransition,
)
from jee_cbt.models.question_model import OptionLetter
from jee_cbt.services.ingestion import load_json_payload
from jee_cbt.services.question_generator import OpenAIQuestionGenerator, QuestionGenerator
from jee_cbt.services.test_flow import Direction, TestSession, load_content

logger = logging.getLogger(__name__)

router = APIRouter()

# ── Pydantic request bodies ──────────────────────────────────────────────────

class ApiKeyBody(BaseModel):
    api_key: str

class TopicSelectionBody(BaseModel):
    show: bool = True

class ToggleTopicBody(BaseModel):
    topic_id: str

class QuestionCountBody(BaseModel):
    count: int

class SelectAnswerBody(BaseModel):
    option: OptionLetter

class NavigateBody(BaseModel):
    direction: Direction

class JumpBody(BaseModel):
    index: int

class SubmitBody(BaseModel):
    confirmed: bool = False


# ── Helpers ──────────────────────────────────────────────────────────────────

def _sid(request: Request) -> str:
    return request.state.session_id


def _test(request: Request) -> TestSession:
    return session.get_test(_sid(request))


def get_generator_factory() -> Callable[[str], QuestionGenerator]:
    """Dependency: api key -> generator. Overridden in tests."""
    return OpenAIQuestionGenerator


def _http_error(e: Exception) -> HTTPException:
    """Domain error → HTTP error with a user-facing message."""
    if isinstance(e, (InvalidFormat, IngestionFailed)):
        return HTTPException(status_code=422, detail=str(e))
    if isinstance(e, GenerationFailed):
        return HTTPException(status_code=503, detail=str(e))
    if isinstance(e, InvalidTransition):
        return HTTPException(status_code=409, detail=str(e))
    if isinstance(e, IndexError):
        return HTTPException(status_code=404, detail="Question not found.")
    if isinstance(e, KeyError):
        return HTTPException(status_code=404, detail=f"Unknown topic: {e.args[0]}")
    return HTTPException(status_code=400, detail=str(e))


async def _read_upload(file: UploadFile) -> object:
    file_bytes = await file.read()
    if len(file_bytes) > MAX_UPLOAD_SIZE:
        raise HTTPException(status_code=413, detail="File too large (max 5MB).")
    try:
        return load_json_payload(file_bytes)
    except IngestionFailed as e:
        raise _http_error(e)


# ── Endpoints: ingestion ─────────────────────────────────────────────────────

@router.post("/api/set-api-key")
async def set_api_key(body: ApiKeyBody, request: Request):
    key = body.api_key.strip()
    if not key:
        raise HTTPException(status_code=400, detail="API key is empty.")
    if not key.startswith("sk-"):
        raise HTTPException(status_code=400, detail="Not a valid OpenAI API key (expected sk-...).")
    session.put(_sid(request), "api_key", key)
    return {"ok": True}


@router.post("/api/upload-questions")
async def upload_questions(request: Request, file: UploadFile = File(...)):
    payload = await _read_upload(file)
    try:
        count = _test(request).ingest_questions(payload)
    except InvalidFormat as e:
        raise _http_error(e)
    return {"count": count, "ok": True, "message": f"{count} questions loaded successfully!"}


@router.post("/api/upload-answer-key")
async def upload_answer_key(request: Request, file: UploadFile = File(...)):
    payload = await _read_upload(file)
    try:
        count = _test(request).ingest_answer_key(payload)
    except InvalidFormat as e:
        raise _http_error(e)
    return {"count": count, "ok": True, "message": "Answer key loaded successfully!"}


@router.post("/api/upload-solutions")
async def upload_solutions(request: Request, file: UploadFile = File(...)):
    payload = await _read_upload(file)
    try:
        count = _test(request).ingest_solutions(payload)
    except InvalidFormat as e:
        raise _http_error(e)
    return {"count": count, "ok": True, "message": f"{count} solutions loaded successfully!"}


@router.post("/api/start-sample-test")
async def start_sample_test(request: Request):
    test = _test(request)
    load_content(test, SAMPLE_QUESTIONS, SAMPLE_ANSWER_KEY, SAMPLE_SOLUTIONS)
    return {"total": len(SAMPLE_QUESTIONS), "ok": True}


# ── Endpoints: topic selection / generation ──────────────────────────────────

@router.get("/api/topics")
async def list_topics():
    return {
        "subjects": {
            subject: [t.model_dump() for t in topics]
            for subject, topics in topics_by_subject().items()
        },
        "questionCounts": list(QUESTION_COUNT_CHOICES),
    }


@router.post("/api/topic-selection")
async def topic_selection(body: TopicSelectionBody, request: Request):
    try:
        _test(request).show_topic_selection(body.show)
    except InvalidTransition as e:
        raise _http_error(e)
    return {"ok": True}


@router.post("/api/toggle-topic")
async def toggle_topic(body: ToggleTopicBody, request: Request):
    try:
        selected = _test(request).toggle_topic(body.topic_id)
    except KeyError as e:
        raise _http_error(e)
    return {"topicId": body.topic_id, "selected": selected, "ok": True}


@router.post("/api/question-count")
async def question_count(body: QuestionCountBody, request: Request):
    try:
        _test(request).set_number_of_questions(body.count)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return {"count": body.count, "ok": True}


@router.post("/api/generate")
async def generate(
    request: Request,
    generator_factory: Callable[[str], QuestionGenerator] = Depends(get_generator_factory),
):
    api_key = session.get(_sid(request), "api_key", "")
    if not api_key:
        raise HTTPException(status_code=400, detail="API key is not set.")
    test = _test(request)
    try:
        generator = generator_factory(api_key)
        total = await asyncio.to_thread(test.generate, generator)
    except (GenerationFailed, InvalidTransition) as e:
        logger.warning(f"/api/generate refused: {e}")
        raise _http_error(e)
    return {"total": total, "ok": True}


# ── Endpoints: test flow ─────────────────────────────────────────────────────

@router.get("/api/state")
async def get_state(request: Request):
    return _test(request).snapshot()


@router.post("/api/start-test")
async def start_test(request: Request):
    try:
        _test(request).start_test()
    except InvalidTransition as e:
        raise _http_error(e)
    return {"ok": True}


@router.post("/api/select-answer")
async def select_answer(body: SelectAnswerBody, request: Request):
    accepted = _test(request).select_answer(body.option)
    if not accepted:
        raise HTTPException(status_code=409, detail="Answers can no longer be changed.")
    return {"ok": True}


@router.post("/api/navigate")
async def navigate(body: NavigateBody, request: Request):
    idx = _test(request).navigate(body.direction)
    return {"index": idx, "ok": True}


@router.post("/api/jump")
async def jump(body: JumpBody, request: Request):
    try:
        idx = _test(request).jump_to_question(body.index)
    except IndexError as e:
        raise _http_error(e)
    return {"index": idx, "ok": True}


@router.post("/api/submit-test")
async def submit_test(body: SubmitBody, request: Request):
    try:
        completed = _test(request).submit_test(lambda: body.confirmed)
    except InvalidTransition as e:
        raise _http_error(e)
    return {"completed": completed, "ok": True}


# ── Endpoints: analysis / review / solutions ─────────────────────────────────

@router.get("/api/results")
async def get_results(request: Request):
    test = _test(request)
    if not test.state.test_completed:
        raise HTTPException(status_code=400, detail="The test has not been submitted yet.")
    return test.analysis()


@router.post("/api/review")
async def review(request: Request):
    try:
        _test(request).request_review()
    except InvalidTransition as e:
        raise _http_error(e)
    return {"ok": True}


@router.post("/api/solutions")
async def show_solutions(request: Request):
    try:
        _test(request).request_solutions()
    except InvalidTransition as e:
        raise _http_error(e)
    return {"ok": True}


@router.get("/api/solutions")
async def list_solutions(request: Request):
    try:
        rows = _test(request).solution_review()
    except InvalidTransition as e:
        raise _http_error(e)
    return {"solutions": rows}


@router.post("/api/close-solutions")
async def close_solutions(request: Request):
    _test(request).close_solutions()
    return {"ok": True}


@router.post("/api/back-to-analysis")
async def back_to_analysis(request: Request):
    try:
        _test(request).return_to_analysis()
    except InvalidTransition as e:
        raise _http_error(e)
    return {"ok": True}


@router.post("/api/reset")
async def reset_session(request: Request):
    session.reset(_sid(request))
    return {"ok": True}
