import random

import pytest

from flashcard_engine.errors import SessionStateError, StoreError
from flashcard_engine.model import (
    CardSettings,
    LearningMode,
    NoCardsAvailable,
    TestAnswerMethod,
)
from flashcard_engine.service import LearningService
from flashcard_engine.session import LearningSession, SessionPhase
from flashcard_engine.store import InMemoryCardStore

pytestmark = pytest.mark.asyncio

PROFILE = "swedish"


def _service(make_card, settings, *cards):
    store = InMemoryCardStore()
    store.add_profile(PROFILE, settings)
    for card in cards:
        store.add_card(PROFILE, card)
    return LearningService(store, rng=random.Random(0)), store


async def _streaks(store):
    return {c.word_name: c.streak for c in await store.fetch_all(PROFILE)}


def _study(session):
    while session.advance():
        pass
    session.complete_study()


async def test_learn_set_end_to_end(make_card):
    service, store = _service(
        make_card,
        CardSettings(cards_per_set=2, streak_length=2),
        make_card("A", "alpha", created_at=1),
        make_card("B", "beta", created_at=2),
        make_card("C", "gamma", created_at=3),
    )

    session = await service.build_learn_session(PROFILE, 1)
    assert [c.word_name for c in session.cards] == ["A", "B"]

    _study(session)
    assert service.check_answer(session, "alpha") == (True, "alpha")
    assert service.check_answer(session, "beta") == (True, "beta")
    report = await service.complete_session(PROFILE, session)

    assert session.passed
    assert report.committed == ["A", "B"]
    assert await _streaks(store) == {"A": 1, "B": 1, "C": 0}
    assert session.has_more_cards
    assert session.next_start_card_number == 3


async def test_failed_learn_set_changes_nothing_until_commit(make_card):
    service, store = _service(
        make_card,
        CardSettings(cards_per_set=2),
        make_card("A", "alpha", streak=1, created_at=1),
        make_card("B", "beta", streak=1, created_at=2),
    )
    session = await service.build_learn_session(PROFILE, 1)
    _study(session)
    service.check_answer(session, "alpha")
    service.check_answer(session, "omega")

    assert not session.passed
    assert await _streaks(store) == {"A": 1, "B": 1}

    session.retry()
    assert session.phase is SessionPhase.STUDY
    assert [c.word_name for c in session.cards] == ["A", "B"]


async def test_learn_start_number_wraps(make_card):
    service, _ = _service(
        make_card,
        CardSettings(cards_per_set=2),
        *[make_card(name, created_at=i) for i, name in enumerate("ABC")],
    )

    session = await service.build_learn_session(PROFILE, 6)

    assert [c.word_name for c in session.cards] == ["C", "A"]


async def test_learn_ignores_learned_cards(make_card):
    service, _ = _service(
        make_card,
        CardSettings(streak_length=2),
        make_card("known", streak=2, created_at=1),
        make_card("new", created_at=2),
    )

    session = await service.build_learn_session(PROFILE, 1)

    assert [c.word_name for c in session.cards] == ["new"]


async def test_no_cards_outcomes(make_card):
    service, _ = _service(make_card, CardSettings(streak_length=3), make_card("fresh"))

    outcome = await service.build_repeat_session(PROFILE)

    assert isinstance(outcome, NoCardsAvailable)
    assert outcome.mode is LearningMode.REPEAT
    assert outcome.profile == PROFILE
    assert "learned" in outcome.explanation

    empty_service, _ = _service(make_card, CardSettings())
    assert isinstance(await empty_service.build_learn_session(PROFILE, 1), NoCardsAvailable)
    assert isinstance(await empty_service.build_test_session(PROFILE), NoCardsAvailable)


async def test_test_session_covers_every_unlearned_card(make_card):
    service, store = _service(
        make_card,
        CardSettings(cards_per_set=1, streak_length=5),
        *[make_card(f"w{i}", f"t{i}", created_at=i) for i in range(6)],
        make_card("done", "finished", streak=5),
    )

    session = await service.build_test_session(PROFILE)

    assert isinstance(session, LearningSession)
    assert session.phase is SessionPhase.TEST
    assert sorted(c.word_name for c in session.cards) == [f"w{i}" for i in range(6)]

    for card in session.cards:
        service.check_answer(session, card.meanings[0].translations[0])
    report = await service.complete_session(PROFILE, session)

    assert report.ok and len(report.committed) == 6
    streaks = await _streaks(store)
    assert all(streaks[f"w{i}"] == 1 for i in range(6))
    assert streaks["done"] == 5


async def test_repeat_miss_returns_card_to_unlearned_pool(make_card):
    service, store = _service(
        make_card,
        CardSettings(streak_length=5),
        make_card("hund", "dog", streak=10),
    )

    session = await service.build_repeat_session(PROFILE)
    assert service.check_answer(session, "cat") == (False, "dog")
    await service.complete_session(PROFILE, session)

    assert await _streaks(store) == {"hund": 0}
    assert [c.word_name for c in await store.fetch_unlearned(PROFILE)] == ["hund"]


async def test_repeat_hit_keeps_card_learned(make_card):
    service, store = _service(
        make_card,
        CardSettings(streak_length=5),
        make_card("hund", "dog", streak=7),
    )

    session = await service.build_repeat_session(PROFILE)
    service.check_answer(session, "dog")
    await service.complete_session(PROFILE, session)

    assert await _streaks(store) == {"hund": 7}


async def test_self_review_commits_immediately(make_card):
    service, store = _service(make_card, CardSettings(), make_card("dog", "hund", streak=1))

    result = await service.record_self_review(PROFILE, "dog", True)

    assert result.is_correct
    assert result.word_name == "dog"
    assert await _streaks(store) == {"dog": 2}


async def test_self_review_session_is_not_committed_twice(make_card):
    service, store = _service(
        make_card,
        CardSettings(test_answer_method=TestAnswerMethod.SELF_REVIEW),
        make_card("hund", created_at=1),
        make_card("katt", created_at=2),
    )
    session = await service.build_test_session(PROFILE)

    first = await service.review_current_card(PROFILE, session, True)
    second = await service.review_current_card(PROFILE, session, False)
    assert await _streaks(store) == {first.word_name: 1, second.word_name: 0}

    report = await service.complete_session(PROFILE, session)

    assert sorted(report.committed) == ["hund", "katt"]
    assert await _streaks(store) == {first.word_name: 1, second.word_name: 0}


async def test_unfinished_session_cannot_be_completed(make_card):
    service, store = _service(make_card, CardSettings(), make_card("hund", "dog"))
    session = await service.build_test_session(PROFILE)

    with pytest.raises(SessionStateError):
        await service.complete_session(PROFILE, session)
    assert await _streaks(store) == {"hund": 0}


async def test_commit_results_directly(make_card):
    service, store = _service(
        make_card, CardSettings(), make_card("hund", "dog", streak=3)
    )
    session = await service.build_test_session(PROFILE)
    service.check_answer(session, "dog")

    report = await service.commit_results(PROFILE, LearningMode.TEST, session.results)

    assert report.committed == ["hund"]
    assert await _streaks(store) == {"hund": 4}


async def test_failed_self_review_commit_keeps_session_on_card(make_card, monkeypatch):
    service, store = _service(
        make_card,
        CardSettings(test_answer_method=TestAnswerMethod.SELF_REVIEW),
        make_card("hund", streak=1),
    )
    session = await service.build_test_session(PROFILE)

    async def full_disk(profile, word_name, new_streak):
        raise StoreError("disk full", profile=profile, word_name=word_name)

    monkeypatch.setattr(store, "commit_streak", full_disk)

    with pytest.raises(StoreError):
        await service.review_current_card(PROFILE, session, True)

    assert session.results == []
    assert session.current_card.word_name == "hund"
    with pytest.raises(SessionStateError):
        await service.complete_session(PROFILE, session)
    assert await _streaks(store) == {"hund": 1}


async def test_next_set_after_cards_graduate(make_card):
    service, _ = _service(
        make_card,
        CardSettings(cards_per_set=2, streak_length=1),
        *[make_card(name, f"{name}-answer", created_at=i) for i, name in enumerate("ABCDE")],
    )

    first = await service.build_learn_session(PROFILE, 1)
    _study(first)
    for card in first.cards:
        service.check_answer(first, f"{card.word_name}-answer")
    await service.complete_session(PROFILE, first)

    assert first.graduated == 2
    assert first.has_more_cards
    second = await service.build_learn_session(PROFILE, first.next_start_card_number)

    assert [c.word_name for c in second.cards] == ["C", "D"]


async def test_graduated_counts_only_cards_now_learned(make_card):
    service, _ = _service(
        make_card,
        CardSettings(cards_per_set=2, streak_length=1),
        *[make_card(name, f"{name}-answer", created_at=i) for i, name in enumerate("ABC")],
    )
    session = await service.build_learn_session(PROFILE, 1)
    _study(session)
    service.check_answer(session, "A-answer")
    service.check_answer(session, "wrong")
    await service.complete_session(PROFILE, session)

    assert session.graduated == 1
    assert session.next_start_card_number == 2
