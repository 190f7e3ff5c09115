"""
services/exam_service.py

Scoring and result analysis.
Pure Python functions — no UI code, no shared state mutation.
"""

from typing import Dict, List, Mapping, Sequence

from jee_cbt.models.question_model import (
    OPTION_LETTERS,
    Question,
    Solution,
    SubjectScore,
    TestResults,
)


def calculate_results(
    questions: Sequence[Question],
    answer_key: Mapping[str, str],
    user_answers: Mapping[str, str],
) -> TestResults:
    """
    Grade the user's answers against the answer key.

    A question counts as attempted when the user answered it and as correct
    when that answer equals the key's entry. Unanswered questions are neither.

    Args:
        questions:    Questions of the test, in presentation order.
        answer_key:   Authoritative key. {str(questionNumber): letter}
        user_answers: User's answers. {str(questionNumber): letter}

    Returns:
        TestResults. percentage is text with one decimal place ("50.0"),
        or "0" when there are no questions. subject_wise follows the order in
        which subjects first appear in questions.
    """
    correct = 0
    attempted = 0
    subject_wise: Dict[str, SubjectScore] = {}

    for q in questions:
        user_ans = user_answers.get(q.key)
        bucket = subject_wise.setdefault(q.subject, SubjectScore())
        bucket.total += 1

        if not user_ans:
            continue
        attempted += 1
        if user_ans == answer_key.get(q.key):
            correct += 1
            bucket.correct += 1

    total = len(questions)
    percentage = f"{correct / total * 100:.1f}" if total > 0 else "0"

    return TestResults(
        correct=correct,
        attempted=attempted,
        total=total,
        percentage=percentage,
        subject_wise=subject_wise,
    )


def subject_percentages(results: TestResults) -> Dict[str, str]:
    """
    Per-subject percentage, one decimal place, same order as subject_wise.
    """
    return {
        subject: f"{s.correct / s.total * 100:.1f}" if s.total else "0"
        for subject, s in results.subject_wise.items()
    }


def calculate_attempt_summary(
    questions: Sequence[Question],
    user_answers: Mapping[str, str],
) -> Dict[str, int]:
    """
    Reduced summary for a test without an answer key.

    Returns:
        {"attempted": int, "unanswered": int, "total": int}
    """
    attempted = sum(1 for q in questions if user_answers.get(q.key))
    return {
        "attempted": attempted,
        "unanswered": len(questions) - attempted,
        "total": len(questions),
    }


def build_solution_review(
    questions: Sequence[Question],
    solutions: Mapping[str, Solution],
    user_answers: Mapping[str, str],
) -> List[Dict[str, object]]:
    """
    One row per question that has a solution, in question order.

    isCorrect compares the user's answer with the solution's correctOption,
    so it works even when no separate answer key was uploaded.
    """
    rows: List[Dict[str, object]] = []
    for q in questions:
        sol = solutions.get(q.key)
        if sol is None:
            continue
        user_ans = user_answers.get(q.key, "")
        rows.append({
            "question": q.model_dump(by_alias=True),
            "solution": sol.model_dump(by_alias=True),
            "userAnswer": user_ans,
            "isCorrect": user_ans == sol.correct_option,
        })
    return rows


def question_statuses(
    questions: Sequence[Question],
    current_index: int,
    user_answers: Mapping[str, str],
    answer_key: Mapping[str, str],
    test_completed: bool,
) -> List[Dict[str, object]]:
    """
    Status of each entry in the question navigator strip.

    Before completion (or without a key) only answered/current is known.
    After completion with a key each answered question is also marked
    correct or incorrect.
    """
    graded = test_completed and bool(answer_key)
    statuses: List[Dict[str, object]] = []
    for idx, q in enumerate(questions):
        user_ans = user_answers.get(q.key)
        entry: Dict[str, object] = {
            "index": idx,
            "questionNumber": q.question_number,
            "answered": bool(user_ans),
            "current": idx == current_index,
        }
        if graded:
            entry["correct"] = bool(user_ans) and user_ans == answer_key.get(q.key)
        statuses.append(entry)
    return statuses


def option_marks(
    question: Question,
    user_answers: Mapping[str, str],
    answer_key: Mapping[str, str],
    test_completed: bool,
) -> List[Dict[str, object]]:
    """
    Per-option view data for one question.

    selected: the user chose this option.
    correct:  (after completion) this is the key's option.
    wrong:    (after completion) the user chose it and it is not the key's.
    """
    user_ans = user_answers.get(question.key)
    key_ans = answer_key.get(question.key)
    marks: List[Dict[str, object]] = []
    for letter in OPTION_LETTERS:
        selected = user_ans == letter
        marks.append({
            "letter": letter,
            "text": question.option_text(letter),
            "selected": selected,
            "correct": test_completed and key_ans == letter,
            "wrong": test_completed and selected and key_ans != letter,
        })
    return marks
