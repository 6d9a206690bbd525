"""
Practice-test core: question sampling, grading, result persistence and
per-user reporting.
"""

from .grading import GradingEngine, grade_answers
from .question_bank import QuestionBank
from .report import ReportAggregator, estimate_percentile
from .result_store import ResultStore

__all__ = [
    "GradingEngine",
    "QuestionBank",
    "ReportAggregator",
    "ResultStore",
    "estimate_percentile",
    "grade_answers",
]
