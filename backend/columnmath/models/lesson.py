from pydantic import BaseModel, ConfigDict
from typing import Literal, Optional


Operator = Literal["+", "−", "×", "÷"]
SoundKind = Literal["correct", "incorrect", "click", "celebrate", "whoosh", "pop"]


class Problem(BaseModel):
    model_config = ConfigDict(frozen=True)

    num1: int
    num2: int
    answer: int
    operator: Operator


class DemoStep(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: int
    label: str
    description: str
    narration: str


class SumVisualization(BaseModel):
    model_config = ConfigDict(frozen=True)

    digit1: int
    digit2: int
    carry: int
    show_split: bool


class BorrowVisualization(BaseModel):
    model_config = ConfigDict(frozen=True)

    top_digit: int
    bottom_digit: int
    show_borrow: bool


class BorrowState(BaseModel):
    model_config = ConfigDict(frozen=True)

    display_digits: list[int]
    original_digits: list[int]
    borrowed: list[bool]
    received_borrow: list[bool]


class DemoSnapshot(BaseModel):
    """Everything the rendering surface needs for one demo step."""

    model_config = ConfigDict(frozen=True)

    skill_tag: str
    step: int
    label: str
    narration: Optional[str] = None
    width: int
    answer_digits: list[str]
    # addition
    carries: list[bool] = []
    sum_visualization: Optional[SumVisualization] = None
    # subtraction
    borrow_state: Optional[BorrowState] = None
    borrow_visualization: Optional[BorrowVisualization] = None


class PracticeResult(BaseModel):
    is_correct: bool
    expected: str
    student: str
    answer_correct: bool
    carries_correct: Optional[bool] = None
    column_errors: list[bool] = []


class SessionSummary(BaseModel):
    correct: int
    total: int
    score: int
    stars: int
