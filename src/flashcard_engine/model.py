"""
Module for object definitions
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CardType(str, Enum):
    STRAIGHT = "straight"  # foreign word -> native meaning
    REVERSE = "reverse"  # native meaning -> foreign word


class TestAnswerMethod(str, Enum):
    __test__ = False

    MANUAL = "manual"
    SELF_REVIEW = "self_review"


class LearningMode(str, Enum):
    LEARN = "learn"
    TEST = "test"
    REPEAT = "repeat"


class Meaning(BaseModel):
    model_config = ConfigDict(frozen=True)

    definition: str
    translated_definition: str | None = None
    # first entry is the one shown as the expected answer
    translations: list[str] = Field(min_length=1, max_length=20)


class Card(BaseModel):
    model_config = ConfigDict(frozen=True)

    word_name: str = Field(min_length=1, max_length=200)
    readings: list[str] = Field(default_factory=list)
    meanings: list[Meaning] = Field(min_length=1, max_length=10)
    card_type: CardType = CardType.STRAIGHT
    streak: int = Field(default=0, ge=0)
    created_at: int = 0  # unix timestamp

    @field_validator("word_name")
    @classmethod
    def _word_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Word name cannot be empty")
        return value

    def is_learned(self, streak_length: int) -> bool:
        return self.streak >= streak_length

    @property
    def required_answers(self) -> int:
        """How many answer fragments a written answer must supply."""
        if self.card_type is CardType.STRAIGHT:
            return len(self.meanings)
        return 1


class CardSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    cards_per_set: int = Field(default=10, ge=1, le=100)
    streak_length: int = Field(default=5, ge=1, le=50)
    test_answer_method: TestAnswerMethod = TestAnswerMethod.MANUAL


class TestResult(BaseModel):
    __test__ = False

    word_name: str
    is_correct: bool
    user_answer: str | None = None
    expected_answer: str | None = None

    @classmethod
    def written(
        cls, word_name: str, is_correct: bool, user_answer: str, expected_answer: str
    ) -> "TestResult":
        return cls(
            word_name=word_name,
            is_correct=is_correct,
            user_answer=user_answer,
            expected_answer=expected_answer,
        )

    @classmethod
    def self_review(cls, word_name: str, is_correct: bool) -> "TestResult":
        return cls(word_name=word_name, is_correct=is_correct)


class NoCardsAvailable(BaseModel):
    mode: LearningMode
    profile: str | None = None

    @property
    def explanation(self) -> str:
        pool = "learned" if self.mode is LearningMode.REPEAT else "unlearned"
        return f"No {pool} cards available for {self.mode.value} mode"


class ValidationFailure(BaseModel):
    field: str | None = None
    message: str


class CommitFailure(BaseModel):
    word_name: str
    error: str


class CommitReport(BaseModel):
    committed: list[str] = Field(default_factory=list)
    failed: list[CommitFailure] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed

