"""
Per-user performance report, recomputed from stored results on every call.
"""

import logging
import math
from typing import Optional

from pymongo import DESCENDING

from ..config import settings
from ..models.report import CategoryStat, RecentResult, UserReport
from ..utils.database import as_object_id, storage_errors, to_public
from .grading import round_half_up

logger = logging.getLogger(__name__)

RECENT_FIELDS = {
    "category": 1,
    "score": 1,
    "total": 1,
    "correct_answers": 1,
    "wrong_answers": 1,
    "submitted_at": 1,
    "status": 1,
}


def estimate_percentile(score: float) -> int:
    """
    Rough percentile for a score out of 100. The bands are not continuous
    at their boundaries; dashboards rely on these exact values.
    """
    if score >= 95:
        return 98
    if score >= 85:
        return 90 + math.floor((score - 85) / 2)
    if score >= 70:
        return 70 + math.floor((score - 70) * 1.5)
    if score < 50:
        return 40
    return math.floor(score * 0.8)


class ReportAggregator:
    def __init__(self, db):
        self.collection = db["test_results"]

    async def build_report(self, user_id: str) -> UserReport:
        owner = as_object_id(user_id)
        if owner is None:
            return UserReport()

        match = {"$match": {"user": owner}}
        with storage_errors("report aggregation"):
            basic = await self.collection.aggregate([
                match,
                {"$group": {
                    "_id": None,
                    "attempts": {"$sum": 1},
                    "avgScore": {"$avg": "$score"},
                }},
            ]).to_list(length=1)

            per_category = await self.collection.aggregate([
                match,
                {"$group": {
                    "_id": "$category",
                    "avgScore": {"$avg": "$score"},
                    "count": {"$sum": 1},
                }},
                {"$sort": {"avgScore": -1}},
            ]).to_list(length=None)

            recent = await self.collection.find(
                {"user": owner}, RECENT_FIELDS
            ).sort("submitted_at", DESCENDING).limit(
                settings.RECENT_RESULTS_LIMIT
            ).to_list(length=settings.RECENT_RESULTS_LIMIT)

        stats = basic[0] if basic else {}
        attempts = stats.get("attempts") or 0
        avg_score = round_half_up(stats.get("avgScore") or 0)

        return UserReport(
            attempts=attempts,
            avg_score=avg_score,
            categories=[
                CategoryStat(
                    category=group["_id"],
                    avg_score=round_half_up(group.get("avgScore") or 0),
                    count=group["count"],
                )
                for group in per_category
            ],
            recent=[RecentResult.model_validate(to_public(doc)) for doc in recent],
            percentile=_percentile(attempts, avg_score),
        )


def _percentile(attempts: int, avg_score: int) -> Optional[int]:
    if not attempts:
        return None
    return estimate_percentile(avg_score)
