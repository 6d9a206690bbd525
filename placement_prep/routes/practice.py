from typing import List

from fastapi import APIRouter, Depends, status

from ..config import settings
from ..dependencies import get_grading_engine, get_question_bank, get_result_store
from ..models.question import Question
from ..models.test_result import (
    GradingSummary,
    PracticeSubmission,
    SubmissionResponse,
    TestResult,
)
from ..models.user import User
from ..services import GradingEngine, QuestionBank, ResultStore
from ..utils.security import get_current_user

router = APIRouter(prefix="/api/practice", tags=["practice"])


@router.get("/questions", response_model=List[Question])
async def get_questions(
    category: str = "Aptitude",
    difficulty: str = "Medium",
    limit: int = settings.DEFAULT_QUESTION_LIMIT,
    current_user: User = Depends(get_current_user),
    question_bank: QuestionBank = Depends(get_question_bank)
):
    """
    Random question set for a practice test. Technical and HR map onto the
    stored Coding and Verbal pools.
    """
    return await question_bank.sample(category, difficulty, limit)


@router.post("/submit", response_model=SubmissionResponse, status_code=status.HTTP_201_CREATED)
async def submit_result(
    submission: PracticeSubmission,
    current_user: User = Depends(get_current_user),
    grading_engine: GradingEngine = Depends(get_grading_engine),
    result_store: ResultStore = Depends(get_result_store)
):
    """
    Grade the submitted answers and store the attempt
    """
    grading = await grading_engine.grade(submission)
    result = await result_store.save(current_user.id, submission, grading)
    return SubmissionResponse(
        result=result,
        grading=GradingSummary(
            total=grading.total,
            correct_answers=grading.correct_answers,
            wrong_answers=grading.wrong_answers,
            score=grading.score,
        ),
        correct_answers=grading.correct_answers_map,
        topic_results=grading.topic_results,
    )


@router.get("/results", response_model=List[TestResult])
async def get_my_results(
    current_user: User = Depends(get_current_user),
    result_store: ResultStore = Depends(get_result_store)
):
    return await result_store.list_by_user(current_user.id)


@router.get("/results/{result_id}", response_model=TestResult)
async def get_result_by_id(
    result_id: str,
    current_user: User = Depends(get_current_user),
    result_store: ResultStore = Depends(get_result_store)
):
    return await result_store.get_by_id(result_id, current_user.id)
