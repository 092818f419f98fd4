from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

OPTION_LETTERS = ("A", "B", "C", "D")

AnswerLetter = Literal["A", "B", "C", "D"]


class Mode(str, Enum):
    NORMAL = "normal"
    MATH = "math"


class _Model(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class QuizItem(_Model):
    question: str = Field(min_length=1)
    options: List[str] = Field(min_length=4, max_length=4)
    correct_answer: AnswerLetter = Field(alias="correctAnswer")
    explanation: str

    @field_validator("options")
    @classmethod
    def _options_are_labelled(cls, options: List[str]) -> List[str]:
        for letter, option in zip(OPTION_LETTERS, options):
            if not option.startswith(f"{letter}) "):
                raise ValueError(f"option {option!r} must start with '{letter}) '")
        return options


class MathQuestion(_Model):
    question: str = Field(min_length=1)
    answer: str = Field(min_length=1)
    explanation: str = Field(min_length=1)


class GeneratedContent(_Model):
    summary: List[str] = Field(min_length=3, max_length=3)
    study_tip: str = Field(alias="studyTip", min_length=1)
    quiz: Optional[List[QuizItem]] = Field(default=None, min_length=3, max_length=3)
    math_question: Optional[MathQuestion] = Field(default=None, alias="mathQuestion")

    @model_validator(mode="after")
    def _exactly_one_exercise(self) -> "GeneratedContent":
        if (self.quiz is None) == (self.math_question is None):
            raise ValueError("exactly one of quiz or mathQuestion is required")
        return self

    @property
    def mode(self) -> Mode:
        return Mode.MATH if self.math_question is not None else Mode.NORMAL

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class RetrievedContext(_Model):
    extract: str
    title: str
    source_url: str = Field(alias="sourceUrl")


class StudyResult(_Model):
    topic: str
    mode: Mode
    timestamp: datetime
    source_url: Optional[str] = Field(default=None, alias="sourceUrl")
    content: GeneratedContent

    def to_payload(self) -> Dict[str, Any]:
        return {
            "success": True,
            "topic": self.topic,
            "mode": self.mode.value,
            "timestamp": self.timestamp.isoformat(),
            "sourceUrl": self.source_url,
            **self.content.to_payload(),
        }


class HistoryItem(_Model):
    id: int
    topic: str
    mode: Mode
    timestamp: datetime
