from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Phase(str, Enum):
    START = "start"
    LOADING = "loading"
    PLAYING = "playing"
    SHOW_RESULT = "show_result"
    GAME_OVER = "game_over"
    ERROR = "error"


class SentenceItem(BaseModel):
    model_config = ConfigDict(
        frozen=True, populate_by_name=True, str_strip_whitespace=True
    )

    sentence: str = Field(min_length=1, strict=True)
    is_correct: bool = Field(alias="isCorrect", strict=True)


class RoundContent(BaseModel):
    model_config = ConfigDict(frozen=True)

    image: str
    sentences: List[SentenceItem]


class AnswerRecord(BaseModel):
    sentence: str
    user_choice: bool
    correct_answer: bool
    is_correct: bool


class GameView(BaseModel):
    """What the page needs to render the current phase."""

    phase: Phase
    image: Optional[str] = None
    sentence: Optional[str] = None
    question_number: int = 0
    total_questions: int = 0
    score: int = 0
    score_percentage: int = 0
    last_judgment_correct: Optional[bool] = None
    is_last_question: bool = False
    error_message: Optional[str] = None
    answers: List[AnswerRecord] = []
