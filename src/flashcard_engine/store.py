"""
Card store contract consumed by the engine, plus an in-memory implementation.
"""

from abc import ABC, abstractmethod

from .errors import NotFound, StoreError, ValidationError
from .logging_utils import logs_handler
from .model import Card, CardSettings

logger = logs_handler.get_logger()


class CardStore(ABC):
    """Where a profile's cards and settings live.

    Implementations wrap their own I/O failures in StoreError and report
    missing profiles or cards with NotFound.
    """

    @abstractmethod
    async def fetch_settings(self, profile: str) -> CardSettings: ...

    @abstractmethod
    async def fetch_all(self, profile: str) -> list[Card]: ...

    @abstractmethod
    async def commit_streak(self, profile: str, word_name: str, new_streak: int) -> None: ...

    async def fetch_unlearned(self, profile: str) -> list[Card]:
        settings = await self.fetch_settings(profile)
        cards = await self.fetch_all(profile)
        return [c for c in cards if not c.is_learned(settings.streak_length)]

    async def fetch_learned(self, profile: str) -> list[Card]:
        settings = await self.fetch_settings(profile)
        cards = await self.fetch_all(profile)
        return [c for c in cards if c.is_learned(settings.streak_length)]


class InMemoryCardStore(CardStore):
    """Keeps cards in dictionaries, ordered by creation time on read."""

    def __init__(self, default_settings: CardSettings | None = None):
        self.default_settings = default_settings or CardSettings()
        self._cards: dict[str, dict[str, Card]] = {}
        self._settings: dict[str, CardSettings] = {}

    def add_profile(self, profile: str, settings: CardSettings | None = None) -> None:
        logger.info("Adding profile: %s", profile)
        self._cards.setdefault(profile, {})
        self._settings[profile] = settings or self.default_settings

    def add_card(self, profile: str, card: Card) -> None:
        cards = self._profile_cards(profile)
        if card.word_name in cards:
            raise ValidationError(f"Card '{card.word_name}' already exists in profile {profile}")
        logger.debug("Adding card: profile=%s word=%s", profile, card.word_name)
        cards[card.word_name] = card

    def remove_card(self, profile: str, word_name: str) -> None:
        cards = self._profile_cards(profile)
        if cards.pop(word_name, None) is None:
            raise NotFound("Card", word_name)

    def _profile_cards(self, profile: str) -> dict[str, Card]:
        try:
            return self._cards[profile]
        except KeyError as e:
            raise NotFound("Profile", profile) from e

    async def fetch_settings(self, profile: str) -> CardSettings:
        self._profile_cards(profile)
        return self._settings[profile]

    async def fetch_all(self, profile: str) -> list[Card]:
        # sorted() is stable, so cards created in the same second keep insertion order
        return sorted(self._profile_cards(profile).values(), key=lambda c: c.created_at)

    async def commit_streak(self, profile: str, word_name: str, new_streak: int) -> None:
        if new_streak < 0:
            raise StoreError("Streak cannot be negative", profile=profile, word_name=word_name)
        cards = self._profile_cards(profile)
        card = cards.get(word_name)
        if card is None:
            raise NotFound("Card", word_name)
        cards[word_name] = card.model_copy(update={"streak": new_streak})
