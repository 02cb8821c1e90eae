from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Callable, Optional, Protocol

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from leaderboard.core.errors import PersistenceError
from leaderboard.core.logging import get_logger
from leaderboard.db.database import transactional_session
from leaderboard.db.repositories import ScoreRepository
from leaderboard.schemas.score import ScoreIn, ScoreOut
from leaderboard.web.pagination import Page, PageRequest

logger = get_logger("leaderboard.services.score", component="service")

SessionScope = Callable[[], AbstractContextManager[Session]]


class ScoreService(Protocol):
    """Persistence capabilities the score endpoint relies on."""

    def save(self, score: ScoreIn) -> ScoreOut:
        ...

    def find_all(self, page_request: PageRequest) -> Page[ScoreOut]:
        ...

    def find_one(self, score_id: int) -> Optional[ScoreOut]:
        ...

    def delete(self, score_id: int) -> None:
        ...


class SqlAlchemyScoreService:
    """ScoreService backed by ``ScoreRepository``, one transaction per call."""

    def __init__(self, session_scope: SessionScope = transactional_session) -> None:
        self._session_scope = session_scope

    def save(self, score: ScoreIn) -> ScoreOut:
        logger.debug("request_save_score", extra={"structured_data": {"score": score.model_dump()}})
        try:
            with self._session_scope() as db:
                repo = ScoreRepository(db)
                if score.id is None:
                    row = repo.add(score.name, score.points)
                else:
                    row = repo.merge(score.id, score.name, score.points)
                result = ScoreOut.model_validate(row)
        except IntegrityError as exc:
            logger.exception("score_save_failed", extra={"structured_data": {"score_id": score.id}})
            raise PersistenceError(detail={"score_id": score.id}) from exc
        return result

    def find_all(self, page_request: PageRequest) -> Page[ScoreOut]:
        logger.debug(
            "request_get_all_scores",
            extra={"structured_data": {"page": page_request.page, "size": page_request.size}},
        )
        with self._session_scope() as db:
            repo = ScoreRepository(db)
            total = repo.count()
            rows = repo.list(
                page_request.offset,
                page_request.size,
                [(order.prop, order.direction) for order in page_request.sort],
            )
            content = [ScoreOut.model_validate(row) for row in rows]
        return Page(
            content=content,
            number=page_request.page,
            size=page_request.size,
            total_elements=total,
            sort=page_request.sort,
        )

    def find_one(self, score_id: int) -> Optional[ScoreOut]:
        logger.debug("request_get_score", extra={"structured_data": {"score_id": score_id}})
        with self._session_scope() as db:
            row = ScoreRepository(db).get(score_id)
            return ScoreOut.model_validate(row) if row is not None else None

    def delete(self, score_id: int) -> None:
        logger.debug("request_delete_score", extra={"structured_data": {"score_id": score_id}})
        with self._session_scope() as db:
            ScoreRepository(db).delete(score_id)


__all__ = ["ScoreService", "SqlAlchemyScoreService", "SessionScope"]
