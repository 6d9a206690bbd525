from datetime import datetime
from typing import List, Optional

from .base import CamelModel
from .test_result import ResultStatus


class CategoryStat(CamelModel):
    category: Optional[str] = None
    avg_score: int
    count: int


class RecentResult(CamelModel):
    id: str
    category: Optional[str] = None
    score: int
    total: int
    correct_answers: int = 0
    wrong_answers: int = 0
    submitted_at: datetime
    status: ResultStatus = ResultStatus.PENDING


class UserReport(CamelModel):
    attempts: int = 0
    avg_score: int = 0
    categories: List[CategoryStat] = []
    recent: List[RecentResult] = []
    percentile: Optional[int] = None
