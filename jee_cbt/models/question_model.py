from typing import Dict, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

OptionLetter = Literal["A", "B", "C", "D"]
OPTION_LETTERS: tuple[str, ...] = ("A", "B", "C", "D")


class _CamelModel(BaseModel):
    """JSON uses camelCase (questionNumber, optionA, ...); Python uses snake_case."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class Question(_CamelModel):
    """
    JEE multiple-choice question with four options.
    Immutable once ingested.
    """
    question_number: int = Field(
        ...,
        description="Question number (unique key within a session)"
    )
    question: str = Field(
        ...,
        description="Question text"
    )
    option_a: str = Field(..., description="Option A")
    option_b: str = Field(..., description="Option B")
    option_c: str = Field(..., description="Option C")
    option_d: str = Field(..., description="Option D")
    subject: str = Field(
        ...,
        description="Subject name (Physics, Chemistry, Mathematics, ...)"
    )
    topic: str = Field(
        ...,
        description="Topic name within the subject"
    )

    @property
    def key(self) -> str:
        """Map key used by answer keys and solution keys."""
        return str(self.question_number)

    def option_text(self, letter: str) -> str:
        return {
            "A": self.option_a,
            "B": self.option_b,
            "C": self.option_c,
            "D": self.option_d,
        }[letter]


class Solution(_CamelModel):
    """Worked solution for a single question."""
    question_number: int = Field(..., description="Question number this solution belongs to")
    detailed_solution: str = Field(..., description="Step-by-step explanation")
    correct_option: str = Field(..., description="Correct option letter")
    final_answer: str = Field(..., description="Final answer in words/numbers")

    @field_validator("correct_option")
    @classmethod
    def normalize_correct_option(cls, v: str) -> str:
        """
        The correct option must be one of A-D. Lower case is accepted and
        stored upper case.
        """
        letter = v.strip().upper()
        if letter not in OPTION_LETTERS:
            raise ValueError(f"correctOption must be one of A-D, got {v!r}")
        return letter


class SubjectScore(BaseModel):
    correct: int = 0
    total: int = 0


class TestResults(_CamelModel):
    """Aggregate and per-subject results of a graded test."""

    correct: int
    attempted: int
    total: int
    percentage: str
    subject_wise: Dict[str, SubjectScore] = Field(default_factory=dict)
