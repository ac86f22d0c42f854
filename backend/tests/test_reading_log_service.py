# backend/tests/test_reading_log_service.py
# Journal de lecture : écritures, type d'événement et recalcul des challenges dans la même mutation.

import asyncio
import datetime as dt

import pytest

from bookit.api.dto.challenge import ChallengeCreateIn
from bookit.api.dto.reading_log import ReadingLogIn, ReadingLogPatchIn
from bookit.core.errors import ReadingLogEntryNotFoundError
from bookit.db.profile_store import InMemoryProfileStore
from bookit.models.reading_log import ReadingLogKind
from bookit.services.challenges import ChallengeService
from bookit.services.profile_service import ProfileService
from bookit.services.reading_log_service import ReadingLogService


def utc(*args) -> dt.datetime:
    return dt.datetime(*args, tzinfo=dt.timezone.utc)


NOW = utc(2024, 1, 8)
USER = "user-1"


@pytest.fixture
def profiles():
    return ProfileService(InMemoryProfileStore(), clock=lambda: NOW)


@pytest.fixture
def service(profiles):
    return ReadingLogService(profiles)


def _books_challenge(profiles):
    data = ChallengeCreateIn.model_validate(
        {
            "name": "2024",
            "type": "BOOKS",
            "timeframe": "YEAR",
            "startDate": "2024-01-01T00:00:00Z",
            "endDate": "2024-12-31T00:00:00Z",
            "target": 12,
        }
    )
    return asyncio.run(ChallengeService(profiles).create_challenge(USER, data))


def test_add_entry_defaults(service):
    entry = asyncio.run(service.add_entry(USER, ReadingLogIn(book_id="b1", title="Dune", pages_read=30)))

    assert entry.id
    assert entry.date == NOW
    assert entry.kind == ReadingLogKind.PROGRESS


def test_add_legacy_finished_note_counts_as_finished(service, profiles):
    challenge = _books_challenge(profiles)
    assert challenge.progress.current == 0

    entry = asyncio.run(
        service.add_entry(USER, ReadingLogIn(book_id="b1", notes="Book Finished", date=utc(2024, 1, 5)))
    )
    assert entry.kind == ReadingLogKind.FINISHED

    stored = asyncio.run(profiles.load(USER))
    assert stored.challenges[0].progress.current == 1
    assert stored.challenges[0].progress.percentage == 8.33


def test_explicit_kind_wins_over_notes(service):
    entry = asyncio.run(
        service.add_entry(USER, ReadingLogIn(book_id="b1", notes="Book Finished", kind=ReadingLogKind.REMOVED))
    )
    assert entry.kind == ReadingLogKind.REMOVED


def test_list_entries_newest_first(service):
    for day in (3, 1, 2):
        asyncio.run(service.add_entry(USER, ReadingLogIn(book_id=f"b{day}", date=utc(2024, 1, day))))

    entries = asyncio.run(service.list_entries(USER))
    assert [e.book_id for e in entries] == ["b3", "b2", "b1"]


def test_update_entry_to_finished_updates_challenge(service, profiles):
    _books_challenge(profiles)
    entry = asyncio.run(service.add_entry(USER, ReadingLogIn(book_id="b1", date=utc(2024, 1, 5))))

    updated = asyncio.run(service.update_entry(USER, entry.id, ReadingLogPatchIn(notes="Book Finished")))

    assert updated.kind == ReadingLogKind.FINISHED
    stored = asyncio.run(profiles.load(USER))
    assert stored.challenges[0].progress.current == 1


def test_update_notes_keeps_kind(service):
    entry = asyncio.run(
        service.add_entry(USER, ReadingLogIn(book_id="b1", kind=ReadingLogKind.FINISHED))
    )
    updated = asyncio.run(service.update_entry(USER, entry.id, ReadingLogPatchIn(notes="great ending")))
    assert updated.kind == ReadingLogKind.FINISHED
    assert updated.notes == "great ending"


def test_delete_entry_recomputes(service, profiles):
    _books_challenge(profiles)
    entry = asyncio.run(
        service.add_entry(USER, ReadingLogIn(book_id="b1", kind=ReadingLogKind.FINISHED, date=utc(2024, 1, 5)))
    )
    asyncio.run(service.delete_entry(USER, entry.id))

    stored = asyncio.run(profiles.load(USER))
    assert stored.reading_log == []
    assert stored.challenges[0].progress.current == 0


def test_unknown_entry(service):
    with pytest.raises(ReadingLogEntryNotFoundError):
        asyncio.run(service.update_entry(USER, "missing", ReadingLogPatchIn(pages_read=3)))
    with pytest.raises(ReadingLogEntryNotFoundError):
        asyncio.run(service.delete_entry(USER, "missing"))
