from datetime import datetime, timedelta

import pytest

from conftest import make_question

from prepcoach.core.exceptions import PersistenceError
from prepcoach.models.interview import InterviewSession, InterviewType, SessionStatus
from prepcoach.storage.session_store import InMemorySessionStore

BASE_TIME = datetime(2026, 3, 1, 12, 0, 0)


def _session(owner: str, minutes: int = 0, type: InterviewType = InterviewType.TECHNICAL, texts=("Q",), **kwargs):
    return InterviewSession(
        owner_id=owner,
        type=type,
        questions=[make_question(f"q{i}", text=text) for i, text in enumerate(texts)],
        created_at=BASE_TIME + timedelta(minutes=minutes),
        **kwargs,
    )


async def test_reads_are_owner_scoped():
    store = InMemorySessionStore()
    session = _session("alice")
    await store.save(session)

    assert await store.get(session.id, "alice") is not None
    assert await store.get(session.id, "bob") is None
    assert await store.delete(session.id, "bob") is False
    assert await store.delete(session.id, "alice") is True
    assert await store.get(session.id, "alice") is None


async def test_store_keeps_copies():
    store = InMemorySessionStore()
    session = _session("alice")
    await store.save(session)

    session.status = SessionStatus.CANCELLED
    loaded = await store.get(session.id, "alice")
    assert loaded.status == SessionStatus.SCHEDULED

    loaded.title = "changed"
    assert (await store.get(session.id, "alice")).title == "Mock Interview"


async def test_cannot_overwrite_another_owners_session():
    store = InMemorySessionStore()
    session = _session("alice")
    await store.save(session)

    hijack = session.model_copy(update={"owner_id": "mallory"})
    with pytest.raises(PersistenceError):
        await store.save(hijack)


async def test_list_newest_first_with_filters_and_paging():
    store = InMemorySessionStore()
    old = _session("alice", minutes=0)
    mid = _session("alice", minutes=5, type=InterviewType.BEHAVIORAL)
    new = _session("alice", minutes=10, status=SessionStatus.COMPLETED)
    for session in (old, mid, new, _session("bob", minutes=20)):
        await store.save(session)

    listed = await store.list_for_owner("alice")
    assert [s.id for s in listed] == [new.id, mid.id, old.id]

    technical = await store.list_for_owner("alice", interview_type=InterviewType.TECHNICAL)
    assert [s.id for s in technical] == [new.id, old.id]

    completed = await store.list_for_owner("alice", status=SessionStatus.COMPLETED)
    assert [s.id for s in completed] == [new.id]

    page = await store.list_for_owner("alice", skip=1, limit=1)
    assert [s.id for s in page] == [mid.id]
    assert await store.count_for_owner("alice") == 3


async def test_recent_question_texts_window():
    store = InMemorySessionStore()
    for i in range(7):
        await store.save(_session("alice", minutes=i, texts=(f"T{i}", "Shared")))
    await store.save(_session("alice", minutes=99, type=InterviewType.CASE, texts=("Case Q",)))

    texts = await store.recent_question_texts("alice", InterviewType.TECHNICAL, session_limit=5)

    assert texts == ["T6", "Shared", "T5", "T4", "T3", "T2"]
