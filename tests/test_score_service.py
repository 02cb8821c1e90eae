from __future__ import annotations

from contextlib import contextmanager

import pytest
from sqlalchemy.exc import IntegrityError

from leaderboard.core.errors import PersistenceError
from leaderboard.db.repositories import ScoreRepository
from leaderboard.models.score import Score
from leaderboard.schemas.score import ScoreIn
from leaderboard.services import score as score_module
from leaderboard.services.score import SqlAlchemyScoreService
from leaderboard.web.pagination import PageRequest, SortOrder


@pytest.fixture()
def service(db_setup):
    return SqlAlchemyScoreService()


def test_save_inserts_then_replaces(service, session):
    created = service.save(ScoreIn(name="alpha", points=3))
    assert created.id is not None

    updated = service.save(ScoreIn(id=created.id, name="alpha", points=8))
    assert updated.id == created.id
    assert updated.points == 8
    assert session.query(Score).count() == 1


def test_save_with_unknown_id_writes_that_row(service):
    stored = service.save(ScoreIn(id=77, name="ghost", points=1))
    assert stored.id == 77
    assert service.find_one(77) == stored


def test_find_one_missing_returns_none(service):
    assert service.find_one(123) is None


def test_delete_missing_is_silent(service):
    service.delete(123)
    created = service.save(ScoreIn(name="x", points=1))
    service.delete(created.id)
    assert service.find_one(created.id) is None


def test_find_all_windows_and_counts(service):
    for i in range(7):
        service.save(ScoreIn(name=f"n{i}", points=i % 3))

    page = service.find_all(PageRequest(page=1, size=3))
    assert page.total_elements == 7
    assert page.total_pages == 3
    assert [s.name for s in page.content] == ["n3", "n4", "n5"]


def test_find_all_sort_is_stable_on_ties(service):
    for name, points in [("a", 2), ("b", 1), ("c", 2), ("d", 1)]:
        service.save(ScoreIn(name=name, points=points))

    page = service.find_all(PageRequest(page=0, size=10, sort=(SortOrder("points", "desc"),)))
    assert [s.name for s in page.content] == ["a", "c", "b", "d"]


def test_integrity_error_becomes_persistence_error(monkeypatch):
    @contextmanager
    def failing_scope():
        yield object()
        raise IntegrityError("INSERT", {}, Exception("constraint failed"))

    class _Repo:
        def __init__(self, db):
            pass

        def add(self, name, points):
            return Score(id=1, name=name, points=points)

    monkeypatch.setattr(score_module, "ScoreRepository", _Repo)
    service = SqlAlchemyScoreService(session_scope=failing_scope)
    with pytest.raises(PersistenceError):
        service.save(ScoreIn(name="dup", points=1))


def test_repository_delete_reports_presence(session):
    repo = ScoreRepository(session)
    score = repo.add("solo", 5)
    assert repo.delete(score.id) is True
    assert repo.delete(score.id) is False
