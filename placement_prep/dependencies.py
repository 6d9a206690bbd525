"""
FastAPI providers for the practice services. Each request gets its own
service objects bound to the request's database handle.
"""

from fastapi import Depends

from .services import GradingEngine, QuestionBank, ReportAggregator, ResultStore
from .utils.database import get_database


def get_question_bank(db=Depends(get_database)) -> QuestionBank:
    return QuestionBank(db)


def get_grading_engine(question_bank: QuestionBank = Depends(get_question_bank)) -> GradingEngine:
    return GradingEngine(question_bank)


def get_result_store(db=Depends(get_database)) -> ResultStore:
    return ResultStore(db)


def get_report_aggregator(db=Depends(get_database)) -> ReportAggregator:
    return ReportAggregator(db)
