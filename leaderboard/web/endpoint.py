"""HTTP-facing handlers for the score resource.

``ScoreEndpoint`` is stateless: it holds nothing but the service reference it
was constructed with, so a single instance is shared across concurrent
requests. Each handler validates identifier presence, delegates to the
service and returns a typed result from ``leaderboard.web.results``.
"""

from __future__ import annotations

from typing import AbstractSet, Sequence

from leaderboard.core.logging import get_logger
from leaderboard.core.metrics import timeit
from leaderboard.schemas.score import ScoreIn
from leaderboard.services.score import ScoreService
from leaderboard.web.headers import (
    create_entity_creation_alert,
    create_entity_deletion_alert,
    create_entity_update_alert,
)
from leaderboard.web.pagination import PageRequest, generate_pagination_headers
from leaderboard.web.results import Created, EndpointResult, InvalidRequest, NotFound, Ok

logger = get_logger("leaderboard.web.endpoint", component="endpoint")

ENTITY_NAME = "score"
SCORE_SORTABLE_FIELDS = frozenset({"id", "name", "points"})


class ScoreEndpoint:
    def __init__(
        self,
        service: ScoreService,
        *,
        base_path: str = "/api/scores",
        sortable_fields: AbstractSet[str] = SCORE_SORTABLE_FIELDS,
        max_page_size: int = 2000,
    ) -> None:
        self._service = service
        self._base_path = base_path
        self._sortable_fields = sortable_fields
        self._max_page_size = max_page_size

    @timeit("api.scores.create")
    def create(self, score: ScoreIn) -> EndpointResult:
        """POST /scores: 201 with the new score, or 400 if it already has an id."""
        logger.debug("rest_request_save_score", extra={"structured_data": {"score": score.model_dump()}})
        if score.id is not None:
            return InvalidRequest("A new score cannot already have an ID", ENTITY_NAME, "idexists")
        result = self._service.save(score)
        return Created(
            body=result,
            location=f"{self._base_path}/{result.id}",
            headers=create_entity_creation_alert(ENTITY_NAME, str(result.id)),
        )

    @timeit("api.scores.update")
    def update(self, score: ScoreIn) -> EndpointResult:
        """PUT /scores: 200 with the stored score, or 400 when the id is missing."""
        logger.debug("rest_request_update_score", extra={"structured_data": {"score": score.model_dump()}})
        if score.id is None:
            return InvalidRequest("Invalid id", ENTITY_NAME, "idnull")
        result = self._service.save(score)
        return Ok(body=result, headers=create_entity_update_alert(ENTITY_NAME, str(score.id)))

    @timeit("api.scores.list")
    def list_all(self, page: int = 0, size: int = 20, sort: Sequence[str] = ()) -> EndpointResult:
        """GET /scores: one page of scores plus X-Total-Count and Link headers."""
        logger.debug(
            "rest_request_get_scores_page",
            extra={"structured_data": {"page": page, "size": size, "sort": list(sort)}},
        )
        try:
            page_request = PageRequest.from_params(page, min(size, self._max_page_size), sort)
        except ValueError as exc:
            return InvalidRequest(str(exc), ENTITY_NAME, "pageinvalid")
        unknown = [order.prop for order in page_request.sort if order.prop not in self._sortable_fields]
        if unknown:
            return InvalidRequest(f"Cannot sort by {', '.join(unknown)}", ENTITY_NAME, "sortinvalid")
        result = self._service.find_all(page_request)
        headers = generate_pagination_headers(result, self._base_path)
        return Ok(body=result.content, headers=headers)

    @timeit("api.scores.get")
    def get_one(self, score_id: int) -> EndpointResult:
        """GET /scores/{id}: the score, or 404 with no body."""
        logger.debug("rest_request_get_score", extra={"structured_data": {"score_id": score_id}})
        score = self._service.find_one(score_id)
        if score is None:
            return NotFound()
        return Ok(body=score)

    @timeit("api.scores.delete")
    def delete(self, score_id: int) -> EndpointResult:
        """DELETE /scores/{id}: always 200; unknown ids are not an error."""
        logger.debug("rest_request_delete_score", extra={"structured_data": {"score_id": score_id}})
        self._service.delete(score_id)
        return Ok(headers=create_entity_deletion_alert(ENTITY_NAME, str(score_id)))


__all__ = ["ScoreEndpoint", "ENTITY_NAME", "SCORE_SORTABLE_FIELDS"]
