"""
Builds learning sessions from a snapshot of a card pool.
Pure logic, no store access.
"""

import random

from .logging_utils import logs_handler
from .model import (
    Card,
    CardSettings,
    LearningMode,
    NoCardsAvailable,
    ValidationFailure,
)
from .session import LearningSession, SessionPhase

logger = logs_handler.get_logger()


def build_learn(
    pool: list[Card],
    settings: CardSettings,
    start_card_number: int,
) -> LearningSession | NoCardsAvailable | ValidationFailure:
    """Cut one set out of the unlearned pool, starting at a 1-indexed card
    number and wrapping around the end of the pool.
    """
    if start_card_number < 1:
        return ValidationFailure(
            field="start_card_number",
            message=f"Start card number must be at least 1, got {start_card_number}",
        )
    snapshot = tuple(pool)
    size = len(snapshot)
    if size == 0:
        return NoCardsAvailable(mode=LearningMode.LEARN)

    set_size = min(settings.cards_per_set, size)
    start_index = (start_card_number - 1) % size
    cards = tuple(snapshot[(start_index + offset) % size] for offset in range(set_size))
    logger.info(
        "Built learn session: start=%d set_size=%d pool=%d",
        start_index + 1,
        set_size,
        size,
    )
    return LearningSession(
        mode=LearningMode.LEARN,
        cards=cards,
        test_answer_method=settings.test_answer_method,
        phase=SessionPhase.STUDY,
        start_index=start_index,
        pool_size=size,
        cards_per_set=settings.cards_per_set,
    )


def _build_shuffled(
    mode: LearningMode,
    pool: list[Card],
    settings: CardSettings,
    rng: random.Random | None,
) -> LearningSession | NoCardsAvailable:
    cards = list(pool)
    if not cards:
        return NoCardsAvailable(mode=mode)
    (rng or random.Random()).shuffle(cards)
    logger.info("Built %s session: cards=%d", mode.value, len(cards))
    return LearningSession(
        mode=mode,
        cards=tuple(cards),
        test_answer_method=settings.test_answer_method,
        phase=SessionPhase.TEST,
        pool_size=len(cards),
    )


def build_test(
    pool: list[Card], settings: CardSettings, rng: random.Random | None = None
) -> LearningSession | NoCardsAvailable:
    """Every unlearned card, shuffled, straight into the test phase."""
    return _build_shuffled(LearningMode.TEST, pool, settings, rng)


def build_repeat(
    pool: list[Card], settings: CardSettings, rng: random.Random | None = None
) -> LearningSession | NoCardsAvailable:
    """Every learned card, shuffled, straight into the test phase."""
    return _build_shuffled(LearningMode.REPEAT, pool, settings, rng)
