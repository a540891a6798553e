import asyncio
import time

from dotenv import load_dotenv

from flashcard_engine.config import load_config
from flashcard_engine.logging_utils import logs_handler
from flashcard_engine.model import Card, CardType, Meaning
from flashcard_engine.service import LearningService
from flashcard_engine.session import LearningSession
from flashcard_engine.store import InMemoryCardStore

DEMO_PROFILE = "demo"


def demo_store(config) -> InMemoryCardStore:
    store = InMemoryCardStore(config.default_settings)
    store.add_profile(DEMO_PROFILE)
    now = int(time.time())
    store.add_card(
        DEMO_PROFILE,
        Card(
            word_name="hund",
            meanings=[Meaning(definition="a domestic animal", translations=["dog", "hound"])],
            created_at=now,
        ),
    )
    store.add_card(
        DEMO_PROFILE,
        Card(
            word_name="äta",
            card_type=CardType.REVERSE,
            meanings=[Meaning(definition="to consume food", translations=["eat"])],
            created_at=now + 1,
        ),
    )
    return store


async def run_demo() -> None:
    config = load_config(dotenv=False)
    logs_handler.setup_logging(level=config.log_level)
    logger = logs_handler.get_logger()

    service = LearningService(demo_store(config), rng=config.make_rng())
    session = await service.build_learn_session(DEMO_PROFILE, 1)
    if not isinstance(session, LearningSession):
        logger.error("Could not start a session: %s", session)
        return

    while session.advance():
        pass
    session.complete_study()

    answers = {"hund": "dgo", "äta": "ata"}
    while session.current_card is not None:
        card = session.current_card
        is_correct, expected = service.check_answer(session, answers[card.word_name])
        logger.info("%s -> correct=%s expected=%s", card.word_name, is_correct, expected)

    report = await service.complete_session(DEMO_PROFILE, session)
    logger.info("Passed=%s committed=%s failed=%s", session.passed, report.committed, report.failed)


if __name__ == "__main__":
    load_dotenv()
    asyncio.run(run_demo())
