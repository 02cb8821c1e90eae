from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from leaderboard.models.score import Score

SORTABLE_COLUMNS = {
    "id": Score.id,
    "name": Score.name,
    "points": Score.points,
}


@dataclass
class ScoreRepository:
    """Repository for score CRUD operations bound to one session."""

    db: Session

    def get(self, score_id: int) -> Optional[Score]:
        return self.db.get(Score, score_id)

    def add(self, name: str, points: int) -> Score:
        score = Score(name=name, points=points)
        self.db.add(score)
        self.db.flush()
        self.db.refresh(score)
        return score

    def merge(self, score_id: int, name: str, points: int) -> Score:
        # whole-entity replace; writes the row even if the id is not stored yet
        score = self.db.merge(Score(id=score_id, name=name, points=points))
        self.db.flush()
        return score

    def count(self) -> int:
        return self.db.execute(select(func.count()).select_from(Score)).scalar_one()

    def list(self, offset: int, limit: int, order_by: Sequence[tuple[str, str]] = ()) -> List[Score]:
        query = select(Score)
        clauses = []
        for prop, direction in order_by:
            column = SORTABLE_COLUMNS[prop]
            clauses.append(column.desc() if direction == "desc" else column.asc())
        if not any(prop == "id" for prop, _ in order_by):
            clauses.append(Score.id.asc())
        query = query.order_by(*clauses).offset(offset).limit(limit)
        return list(self.db.execute(query).scalars().all())

    def delete(self, score_id: int) -> bool:
        score = self.get(score_id)
        if score is None:
            return False
        self.db.delete(score)
        self.db.flush()
        return True
