from leaderboard.db.repositories.score import SORTABLE_COLUMNS, ScoreRepository

__all__ = [
    "SORTABLE_COLUMNS",
    "ScoreRepository",
]
