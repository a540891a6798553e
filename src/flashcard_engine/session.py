"""
In-memory state of one learning pass: study phase, test phase, results.
"""

from dataclasses import dataclass, field
from enum import Enum

from . import validator
from .errors import SessionStateError
from .logging_utils import logs_handler
from .model import Card, LearningMode, TestAnswerMethod, TestResult

logger = logs_handler.get_logger()


class SessionPhase(str, Enum):
    STUDY = "study"
    TEST = "test"
    COMPLETED = "completed"


@dataclass
class LearningSession:
    mode: LearningMode
    cards: tuple[Card, ...]
    test_answer_method: TestAnswerMethod
    phase: SessionPhase
    # position of the first card within the pool it was cut from (Learn only)
    start_index: int = 0
    pool_size: int = 0
    cards_per_set: int = 0
    current_index: int = 0
    results: list[TestResult] = field(default_factory=list)
    # cards of this set that left the unlearned pool when results were committed
    graduated: int = 0

    @property
    def current_card(self) -> Card | None:
        if self.phase is SessionPhase.COMPLETED:
            return None
        if self.current_index < len(self.cards):
            return self.cards[self.current_index]
        return None

    @property
    def progress(self) -> str:
        shown = min(self.current_index + 1, len(self.cards))
        return f"{shown}/{len(self.cards)}"

    # Study phase

    def advance(self) -> bool:
        """Show the next study card. Returns False at the end of the set."""
        self._require(SessionPhase.STUDY, "advance")
        if self.current_index + 1 < len(self.cards):
            self.current_index += 1
            return True
        return False

    @property
    def is_study_complete(self) -> bool:
        return self.phase is SessionPhase.STUDY and self.current_index + 1 >= len(self.cards)

    def complete_study(self) -> None:
        self._require(SessionPhase.STUDY, "complete study")
        if not self.is_study_complete:
            raise SessionStateError(
                f"Only {self.current_index + 1} of {len(self.cards)} cards were studied"
            )
        self.phase = SessionPhase.TEST
        self.current_index = 0
        self.results.clear()
        logger.debug("Study finished, testing %d cards", len(self.cards))

    # Test phase

    def check_answer(self, user_input: str | list[str]) -> tuple[bool, str]:
        card = self.card_under_test("check an answer", TestAnswerMethod.MANUAL)
        is_correct, expected = validator.validate(card, user_input)
        if isinstance(user_input, str):
            answer = user_input.strip()
        else:
            answer = ", ".join(user_input)
        self._record(TestResult.written(card.word_name, is_correct, answer, expected))
        return is_correct, expected

    def record_self_review(self, is_correct: bool) -> TestResult:
        card = self.card_under_test("record a self-review", TestAnswerMethod.SELF_REVIEW)
        result = TestResult.self_review(card.word_name, is_correct)
        self._record(result)
        return result

    @property
    def is_complete(self) -> bool:
        return self.phase is SessionPhase.COMPLETED

    @property
    def passed(self) -> bool:
        return self.is_complete and bool(self.results) and all(r.is_correct for r in self.results)

    def retry(self) -> None:
        """Go back to studying the identical set after a failed test."""
        if self.mode is not LearningMode.LEARN:
            raise SessionStateError(f"{self.mode.value} sessions cannot be retried")
        self._require(SessionPhase.COMPLETED, "retry")
        self.phase = SessionPhase.STUDY
        self.current_index = 0
        self.results.clear()

    # Set navigation (Learn mode)

    @property
    def set_number(self) -> int:
        if not self.cards_per_set:
            return 1
        return self.start_index // self.cards_per_set + 1

    @property
    def total_sets(self) -> int:
        if not self.cards_per_set:
            return 1
        return -(-self.pool_size // self.cards_per_set)

    @property
    def has_more_cards(self) -> bool:
        return self.mode is LearningMode.LEARN and self.start_index + len(self.cards) < self.pool_size

    @property
    def next_start_card_number(self) -> int:
        """Card number of the next set in the pool as it is after the commit.

        Graduated cards are no longer in the unlearned pool, so the cards that
        followed this set have moved up by that many places.
        """
        return self.start_index + len(self.cards) - self.graduated + 1

    def card_under_test(self, action: str, method: TestAnswerMethod) -> Card:
        self._require(SessionPhase.TEST, action)
        if self.test_answer_method is not method:
            raise SessionStateError(
                f"Cannot {action} in a {self.test_answer_method.value} session"
            )
        return self.cards[self.current_index]

    def _record(self, result: TestResult) -> None:
        self.results.append(result)
        self.current_index += 1
        if len(self.results) >= len(self.cards):
            self.phase = SessionPhase.COMPLETED
            logger.info(
                "Session completed: mode=%s cards=%d passed=%s",
                self.mode.value,
                len(self.cards),
                self.passed,
            )

    def _require(self, phase: SessionPhase, action: str) -> None:
        if self.phase is not phase:
            raise SessionStateError(f"Cannot {action} during the {self.phase.value} phase")
