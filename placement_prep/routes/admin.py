from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pymongo import DESCENDING, ReturnDocument

from ..dependencies import get_question_bank, get_result_store
from ..models.mock_interview import AdminMockInterview, MockInterview, MockReview
from ..models.question import QuestionStats
from ..models.test_result import AdminSubmission, SubmissionReview, TestResult
from ..services import QuestionBank, ResultStore
from ..services.result_store import MAX_ADMIN_PAGE
from ..services.grading import round_half_up
from ..utils.database import as_object_id, attach_owners, get_database, storage_errors, to_public
from ..utils.errors import NotFoundError
from ..utils.security import get_current_admin

router = APIRouter(prefix="/api/admin", tags=["admin"], dependencies=[Depends(get_current_admin)])


@router.get("/submissions", response_model=List[AdminSubmission])
async def list_submissions(
    status: Optional[str] = None,
    category: Optional[str] = None,
    limit: int = Query(50, ge=1),
    skip: int = Query(0, ge=0),
    result_store: ResultStore = Depends(get_result_store)
):
    """
    Practice submissions across all users, newest first
    """
    return await result_store.list_submissions(status, category, limit, skip)


@router.put("/submissions/{submission_id}", response_model=TestResult)
async def update_submission(
    submission_id: str,
    review: SubmissionReview,
    result_store: ResultStore = Depends(get_result_store)
):
    """
    Manual grading: override status, score, counts or add notes
    """
    return await result_store.review(submission_id, review)


@router.get("/questions/stats", response_model=QuestionStats)
async def question_stats(question_bank: QuestionBank = Depends(get_question_bank)):
    by_category = await question_bank.count_by_category()
    return {"total": sum(by_category.values()), "by_category": by_category}


@router.get("/mocks", response_model=List[AdminMockInterview])
async def list_mocks(
    type: Optional[str] = None,
    limit: int = Query(50, ge=1),
    skip: int = Query(0, ge=0),
    db=Depends(get_database)
):
    query = {}
    if type:
        query["type"] = type
    limit = min(MAX_ADMIN_PAGE, limit)

    with storage_errors("mock interview listing"):
        docs = await db["mock_interviews"].find(query).sort(
            "submitted_at", DESCENDING
        ).skip(skip).limit(limit).to_list(length=limit)
    await attach_owners(db, docs)
    return [to_public(doc) for doc in docs]


@router.get("/mocks/{mock_id}", response_model=AdminMockInterview)
async def get_mock(mock_id: str, db=Depends(get_database)):
    oid = as_object_id(mock_id)
    if oid is None:
        raise NotFoundError("Mock not found")
    with storage_errors("mock interview lookup"):
        doc = await db["mock_interviews"].find_one({"_id": oid})
    if not doc:
        raise NotFoundError("Mock not found")
    await attach_owners(db, [doc])
    return to_public(doc)


@router.put("/mocks/{mock_id}", response_model=MockInterview)
async def update_mock(mock_id: str, review: MockReview, db=Depends(get_database)):
    """
    Record the reviewer's score and feedback
    """
    oid = as_object_id(mock_id)
    if oid is None:
        raise NotFoundError("Mock not found")

    updates = {"reviewed_at": datetime.utcnow()}
    if review.score is not None:
        updates["score"] = round_half_up(review.score)
    if review.feedback is not None:
        updates["feedback"] = review.feedback

    with storage_errors("mock interview review"):
        doc = await db["mock_interviews"].find_one_and_update(
            {"_id": oid},
            {"$set": updates},
            return_document=ReturnDocument.AFTER
        )
    if not doc:
        raise NotFoundError("Mock not found")
    return to_public(doc)
