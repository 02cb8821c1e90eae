from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, Response

from leaderboard.core.config import settings
from leaderboard.schemas.score import BIGINT_MAX, BIGINT_MIN, ScoreIn, ScoreOut
from leaderboard.services.score import ScoreService, SqlAlchemyScoreService
from leaderboard.web.endpoint import ScoreEndpoint
from leaderboard.web.results import to_response

router = APIRouter(prefix="/scores", tags=["scores"])


def get_score_service() -> ScoreService:
    return SqlAlchemyScoreService()


def get_score_endpoint(service: ScoreService = Depends(get_score_service)) -> ScoreEndpoint:
    return ScoreEndpoint(
        service,
        base_path=f"{settings.api_prefix}/scores",
        max_page_size=settings.max_page_size,
    )


@router.post("", status_code=201, response_model=ScoreOut)
def create_score(payload: ScoreIn, endpoint: ScoreEndpoint = Depends(get_score_endpoint)) -> Response:
    return to_response(endpoint.create(payload))


@router.put("", response_model=ScoreOut)
def update_score(payload: ScoreIn, endpoint: ScoreEndpoint = Depends(get_score_endpoint)) -> Response:
    return to_response(endpoint.update(payload))


@router.get("", response_model=List[ScoreOut])
def list_scores(
    page: int = Query(0, ge=0, le=BIGINT_MAX),
    size: int = Query(settings.default_page_size, ge=1),
    sort: Optional[List[str]] = Query(None, description="property[,asc|desc]; may be repeated"),
    endpoint: ScoreEndpoint = Depends(get_score_endpoint),
) -> Response:
    return to_response(endpoint.list_all(page, size, sort or ()))


@router.get("/{score_id}", response_model=ScoreOut)
def get_score(
    score_id: int = Path(ge=BIGINT_MIN, le=BIGINT_MAX),
    endpoint: ScoreEndpoint = Depends(get_score_endpoint),
) -> Response:
    return to_response(endpoint.get_one(score_id))


@router.delete("/{score_id}")
def delete_score(
    score_id: int = Path(ge=BIGINT_MIN, le=BIGINT_MAX),
    endpoint: ScoreEndpoint = Depends(get_score_endpoint),
) -> Response:
    return to_response(endpoint.delete(score_id))
