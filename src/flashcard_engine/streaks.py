"""
Spaced-repetition streak rules and the commit of results to a card store.
"""

import asyncio

from .errors import NotFound, StoreError
from .logging_utils import logs_handler
from .model import CommitFailure, CommitReport, LearningMode, TestResult
from .store import CardStore

logger = logs_handler.get_logger()


def next_streak(mode: LearningMode, prior: int, is_correct: bool) -> int:
    if not is_correct:
        return 0
    if mode is LearningMode.REPEAT:
        # repeat re-checks retention, it does not earn progress
        return prior
    return prior + 1


class StreakUpdater:
    """Applies test results to stored streaks.

    The new streak depends on the stored one, so each profile's commit runs
    under its own lock and re-reads the store inside it.
    """

    def __init__(self, store: CardStore):
        self.store = store
        self._locks: dict[str, asyncio.Lock] = {}

    def _lock_for(self, profile: str) -> asyncio.Lock:
        lock = self._locks.get(profile)
        if lock is None:
            lock = self._locks[profile] = asyncio.Lock()
        return lock

    async def _current_streaks(self, profile: str) -> dict[str, int]:
        cards = await self.store.fetch_all(profile)
        return {card.word_name: card.streak for card in cards}

    async def _apply(
        self,
        profile: str,
        mode: LearningMode,
        result: TestResult,
        streaks: dict[str, int],
    ) -> int:
        prior = streaks.get(result.word_name)
        if prior is None:
            raise NotFound("Card", result.word_name)
        new = next_streak(mode, prior, result.is_correct)
        if new != prior:
            await self.store.commit_streak(profile, result.word_name, new)
            streaks[result.word_name] = new
        logger.debug(
            "Streak %s: %d -> %d (mode=%s correct=%s)",
            result.word_name,
            prior,
            new,
            mode.value,
            result.is_correct,
        )
        return new

    async def commit_results(
        self, profile: str, mode: LearningMode, results: list[TestResult]
    ) -> CommitReport:
        report = CommitReport()
        if not results:
            return report

        async with self._lock_for(profile):
            try:
                streaks = await self._current_streaks(profile)
            except (NotFound, StoreError) as e:
                logger.error("Could not read cards for profile=%s: %s", profile, e)
                report.failed = [CommitFailure(word_name=r.word_name, error=str(e)) for r in results]
                return report

            for result in results:
                try:
                    await self._apply(profile, mode, result, streaks)
                except (NotFound, StoreError) as e:
                    logger.warning(
                        "Streak commit failed: profile=%s word=%s: %s",
                        profile,
                        result.word_name,
                        e,
                    )
                    report.failed.append(CommitFailure(word_name=result.word_name, error=str(e)))
                    continue
                report.committed.append(result.word_name)

        logger.info(
            "Committed %s results for profile=%s: committed=%d failed=%d",
            mode.value,
            profile,
            len(report.committed),
            len(report.failed),
        )
        return report

    async def commit_one(
        self, profile: str, mode: LearningMode, result: TestResult
    ) -> TestResult:
        """Commit a single result right away. Store errors propagate."""
        async with self._lock_for(profile):
            streaks = await self._current_streaks(profile)
            await self._apply(profile, mode, result, streaks)
        return result
