import os
import sys

import pytest
from dotenv import load_dotenv


def _add_src_to_path():
    # Ensure `src` is importable when running tests without installing the package
    here = os.path.dirname(__file__)
    src_path = os.path.abspath(os.path.join(here, "..", "src"))
    if src_path not in sys.path:
        sys.path.insert(0, src_path)


load_dotenv()
_add_src_to_path()

from flashcard_engine.model import Card, CardType, Meaning  # noqa: E402


def build_card(
    word: str,
    *translations: str,
    card_type: CardType = CardType.STRAIGHT,
    streak: int = 0,
    created_at: int = 0,
    readings: list[str] | None = None,
    meanings: list[list[str]] | None = None,
) -> Card:
    """One meaning per list in `meanings`, or a single meaning from `translations`."""
    groups = meanings or [list(translations) or [f"{word}-translation"]]
    return Card(
        word_name=word,
        readings=readings or [],
        meanings=[Meaning(definition=f"meaning of {word}", translations=g) for g in groups],
        card_type=card_type,
        streak=streak,
        created_at=created_at,
    )


@pytest.fixture
def make_card():
    return build_card
