"""
Environment-driven configuration for the engine and its entry points.
"""

import os
import random

import pydantic
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from .errors import ValidationError
from .model import CardSettings, TestAnswerMethod, ValidationFailure

ENV_PREFIX = "FLASHCARD_"


class EngineConfig(BaseModel):
    log_level: str = "info"
    shuffle_seed: int | None = None
    cards_per_set: int = Field(default=10, ge=1, le=100)
    streak_length: int = Field(default=5, ge=1, le=50)
    test_method: TestAnswerMethod = TestAnswerMethod.MANUAL

    @property
    def default_settings(self) -> CardSettings:
        return CardSettings(
            cards_per_set=self.cards_per_set,
            streak_length=self.streak_length,
            test_answer_method=self.test_method,
        )

    def make_rng(self) -> random.Random:
        return random.Random(self.shuffle_seed)


_ENV_FIELDS = {
    "log_level": "LOG_LEVEL",
    "shuffle_seed": "SHUFFLE_SEED",
    "cards_per_set": "CARDS_PER_SET",
    "streak_length": "STREAK_LENGTH",
    "test_method": "TEST_METHOD",
}


def load_config(dotenv: bool = True) -> EngineConfig:
    """Read FLASHCARD_* variables, loading a .env file first when present."""
    if dotenv:
        load_dotenv()
    raw = {}
    for field_name, suffix in _ENV_FIELDS.items():
        value = os.getenv(ENV_PREFIX + suffix)
        if value is not None and value.strip():
            raw[field_name] = value.strip().lower() if field_name == "test_method" else value.strip()
    try:
        return EngineConfig(**raw)
    except pydantic.ValidationError as e:
        raise ValidationError(f"Invalid {ENV_PREFIX}* environment: {e}") from e


def parse_card_settings(raw: dict) -> CardSettings | ValidationFailure:
    """Turn user-supplied settings into CardSettings, or a failure to display."""
    try:
        return CardSettings(**raw)
    except pydantic.ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or None
        return ValidationFailure(field=field, message=first.get("msg", str(e)))
