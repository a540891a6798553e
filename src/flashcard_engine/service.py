from __future__ import annotations

import random

from . import builder
from .errors import SessionStateError, StoreError
from .logging_utils import logs_handler
from .model import (
    CommitReport,
    LearningMode,
    NoCardsAvailable,
    TestAnswerMethod,
    TestResult,
    ValidationFailure,
)
from .session import LearningSession
from .store import CardStore
from .streaks import StreakUpdater

logger = logs_handler.get_logger()


class LearningService:
    """Entry points for driving learn, test and repeat sessions of a profile.

    Only one session per profile should be active at a time; the service
    serialises streak commits per profile but does not track sessions.
    """

    store: CardStore
    streaks: StreakUpdater

    def __init__(self, store: CardStore, rng: random.Random | None = None):
        self.store = store
        self.rng = rng or random.Random()
        self.streaks = StreakUpdater(store)

    async def build_learn_session(
        self, profile: str, start_card_number: int = 1
    ) -> LearningSession | NoCardsAvailable | ValidationFailure:
        logger.info("Building learn session: profile=%s start=%s", profile, start_card_number)
        settings = await self._fetch(profile, self.store.fetch_settings)
        pool = await self._fetch(profile, self.store.fetch_unlearned)
        return self._with_profile(profile, builder.build_learn(pool, settings, start_card_number))

    async def build_test_session(self, profile: str) -> LearningSession | NoCardsAvailable:
        logger.info("Building test session: profile=%s", profile)
        settings = await self._fetch(profile, self.store.fetch_settings)
        pool = await self._fetch(profile, self.store.fetch_unlearned)
        return self._with_profile(profile, builder.build_test(pool, settings, self.rng))

    async def build_repeat_session(self, profile: str) -> LearningSession | NoCardsAvailable:
        logger.info("Building repeat session: profile=%s", profile)
        settings = await self._fetch(profile, self.store.fetch_settings)
        pool = await self._fetch(profile, self.store.fetch_learned)
        return self._with_profile(profile, builder.build_repeat(pool, settings, self.rng))

    def check_answer(self, session: LearningSession, user_input: str | list[str]) -> tuple[bool, str]:
        return session.check_answer(user_input)

    async def record_self_review(
        self,
        profile: str,
        word_name: str,
        is_correct: bool,
        mode: LearningMode = LearningMode.LEARN,
    ) -> TestResult:
        """Commit a learner's own verdict for one card immediately."""
        result = TestResult.self_review(word_name, is_correct)
        logger.debug(
            "Self-review: profile=%s word=%s correct=%s", profile, word_name, is_correct
        )
        return await self.streaks.commit_one(profile, mode, result)

    async def review_current_card(
        self, profile: str, session: LearningSession, is_correct: bool
    ) -> TestResult:
        """Commit a self-review verdict, then record it in the session.

        A failed commit leaves the session on the same card.
        """
        card = session.card_under_test("record a self-review", TestAnswerMethod.SELF_REVIEW)
        await self.record_self_review(profile, card.word_name, is_correct, mode=session.mode)
        return session.record_self_review(is_correct)

    async def commit_results(
        self, profile: str, mode: LearningMode, results: list[TestResult]
    ) -> CommitReport:
        return await self.streaks.commit_results(profile, mode, results)

    async def complete_session(self, profile: str, session: LearningSession) -> CommitReport:
        """Commit the results of a finished session.

        Self-review sessions were committed card by card as they went, so
        nothing is written again for them. For learn sessions the set cards
        that became learned are counted, which moves next_start_card_number.
        """
        if not session.is_complete:
            raise SessionStateError(
                f"Session answered {len(session.results)} of {len(session.cards)} cards"
            )
        if session.test_answer_method is TestAnswerMethod.SELF_REVIEW:
            report = CommitReport(committed=[r.word_name for r in session.results])
        else:
            report = await self.commit_results(profile, session.mode, list(session.results))
        if session.mode is LearningMode.LEARN:
            await self._count_graduated(profile, session)
        return report

    async def _count_graduated(self, profile: str, session: LearningSession) -> None:
        try:
            settings = await self.store.fetch_settings(profile)
            learned = {c.word_name for c in await self.store.fetch_learned(profile)}
        except StoreError as e:
            logger.warning("Could not recount learned cards for profile=%s: %s", profile, e)
            return
        session.graduated = sum(1 for c in session.cards if c.word_name in learned)
        logger.debug(
            "Graduated %d of %d cards (streak_length=%d)",
            session.graduated,
            len(session.cards),
            settings.streak_length,
        )

    @staticmethod
    def _with_profile(profile, outcome):
        if isinstance(outcome, NoCardsAvailable):
            outcome.profile = profile
            logger.info("%s: profile=%s", outcome.explanation, profile)
        return outcome

    @staticmethod
    async def _fetch(profile, fetcher):
        try:
            return await fetcher(profile)
        except StoreError as e:
            logger.error("Card store failed for profile=%s: %s", profile, e)
            raise
