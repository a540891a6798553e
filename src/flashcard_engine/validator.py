"""
Per-card-type answer checking on top of the fuzzy matcher.
"""

import re

from . import matcher
from .errors import ValidationError
from .logging_utils import logs_handler
from .model import Card, CardType, Meaning

logger = logs_handler.get_logger()

# "/" is left alone so translations such as "and/or" survive
FRAGMENT_SEPARATORS = re.compile(r"[,;\n]")


def split_fragments(user_input: str | list[str] | None) -> list[str]:
    """Split a typed answer into the separate translations it lists."""
    if user_input is None:
        return []
    if isinstance(user_input, str):
        parts = FRAGMENT_SEPARATORS.split(user_input)
    else:
        parts = [p for item in user_input for p in FRAGMENT_SEPARATORS.split(item)]
    return [p.strip() for p in parts if p.strip()]


def expected_answer(card: Card) -> str:
    if card.card_type is CardType.REVERSE:
        return card.word_name
    return ", ".join(m.translations[0] for m in card.meanings)


def _meaning_matches(meaning: Meaning, fragment: str) -> bool:
    return matcher.best_match(fragment, meaning.translations) is not None


def _cover_meanings(card: Card, fragments: list[str]) -> bool:
    """True when every meaning can be paired with its own fragment.

    Bipartite matching with augmenting paths, so a fragment that fits two
    meanings is moved when another fragment only fits one of them.
    """
    if len(fragments) < card.required_answers:
        return False

    candidates = [
        [f for f, fragment in enumerate(fragments) if _meaning_matches(meaning, fragment)]
        for meaning in card.meanings
    ]
    owner: dict[int, int] = {}

    def assign(m_idx: int, seen: set[int]) -> bool:
        for f_idx in candidates[m_idx]:
            if f_idx in seen:
                continue
            seen.add(f_idx)
            if f_idx not in owner or assign(owner[f_idx], seen):
                owner[f_idx] = m_idx
                return True
        return False

    return all(assign(m_idx, set()) for m_idx in range(len(card.meanings)))


def _single_answer(user_input: str | list[str]) -> str:
    if isinstance(user_input, str):
        return user_input
    if len(user_input) != 1:
        raise ValidationError(f"Expected a single answer, got {len(user_input)}")
    return user_input[0]


def validate(card: Card, user_input: str | list[str]) -> tuple[bool, str]:
    """Judge a written answer for a card.

    Straight cards take one fragment per meaning, either as a list or as a
    single string separated by commas, semicolons or newlines. Reverse cards
    take exactly one answer.

    Returns (is_correct, expected_answer) where expected_answer is the text to
    show after the attempt.
    """
    expected = expected_answer(card)
    if card.card_type is CardType.REVERSE:
        answer = _single_answer(user_input)
        is_correct = matcher.best_match(answer, [card.word_name, *card.readings]) is not None
    else:
        is_correct = _cover_meanings(card, split_fragments(user_input))

    logger.debug(
        "Checked answer: word=%s type=%s correct=%s",
        card.word_name,
        card.card_type.value,
        is_correct,
    )
    return is_correct, expected
