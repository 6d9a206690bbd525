"""
Persistence of graded practice attempts.
"""

import logging
from datetime import datetime
from typing import List, Optional

from bson import ObjectId
from pymongo import DESCENDING, ReturnDocument

from ..models.test_result import (
    AdminSubmission,
    GradingResult,
    PracticeSubmission,
    ResultStatus,
    SubmissionReview,
    TestResult,
)
from ..utils.database import as_object_id, attach_owners, storage_errors, to_public
from ..utils.errors import ForbiddenError, NotFoundError, ValidationFailure

logger = logging.getLogger(__name__)

MAX_ADMIN_PAGE = 200


def _owner_id(user_id) -> ObjectId:
    oid = as_object_id(user_id)
    if oid is None:
        raise ValidationFailure("Invalid user id")
    return oid


class ResultStore:
    def __init__(self, db):
        self.db = db
        self.collection = db["test_results"]

    async def save(
        self,
        user_id: str,
        submission: PracticeSubmission,
        grading: GradingResult
    ) -> TestResult:
        doc = {
            "user": _owner_id(user_id),
            "category": submission.category,
            "difficulty": submission.difficulty,
            "total": grading.total,
            "correct_answers": grading.correct_answers,
            "wrong_answers": grading.wrong_answers,
            "score": grading.score,
            "submitted_at": datetime.utcnow(),
            "submission_code": submission.submission_code,
            "language": submission.language,
            "status": ResultStatus.MANUAL_REVIEW.value,
            "topic_results": [t.model_dump() for t in grading.topic_results],
            "correct_answers_map": dict(grading.correct_answers_map),
            "questions_snapshot": [q.model_dump() for q in grading.questions_snapshot],
            "time_taken": str(submission.time_taken or ""),
            "admin_notes": "",
            "reviewed_at": None,
        }
        with storage_errors("result insert"):
            inserted = await self.collection.insert_one(doc)
        doc["_id"] = inserted.inserted_id
        logger.info(f"saved result {inserted.inserted_id} for user {user_id} (score {grading.score})")
        return TestResult.model_validate(to_public(doc))

    async def list_by_user(self, user_id: str) -> List[TestResult]:
        with storage_errors("result listing"):
            docs = await self.collection.find(
                {"user": _owner_id(user_id)}
            ).sort("submitted_at", DESCENDING).to_list(length=None)
        return [TestResult.model_validate(to_public(doc)) for doc in docs]

    async def get_by_id(self, result_id: str, requesting_user_id: str) -> TestResult:
        oid = as_object_id(result_id)
        if oid is None:
            raise NotFoundError("Result not found")

        with storage_errors("result lookup"):
            doc = await self.collection.find_one({"_id": oid})
        if doc is None:
            raise NotFoundError("Result not found")
        if str(doc.get("user")) != str(requesting_user_id):
            raise ForbiddenError()
        return TestResult.model_validate(to_public(doc))

    async def list_submissions(
        self,
        status: Optional[str] = None,
        category: Optional[str] = None,
        limit: int = 50,
        skip: int = 0
    ) -> List[AdminSubmission]:
        """
        Newest-first submissions across all users for the review console,
        each with its owner's name and email.
        """
        query = {}
        if status:
            query["status"] = status
        if category:
            query["category"] = category
        limit = max(1, min(limit, MAX_ADMIN_PAGE))

        with storage_errors("submission listing"):
            docs = await self.collection.find(query).sort(
                "submitted_at", DESCENDING
            ).skip(max(0, skip)).limit(limit).to_list(length=limit)
        await attach_owners(self.db, docs)
        return [AdminSubmission.model_validate(to_public(doc)) for doc in docs]

    async def review(self, result_id: str, review: SubmissionReview) -> TestResult:
        oid = as_object_id(result_id)
        if oid is None:
            raise NotFoundError("Submission not found")

        updates = review.model_dump(mode="json", exclude_unset=True)
        updates["reviewed_at"] = datetime.utcnow()
        with storage_errors("submission review"):
            doc = await self.collection.find_one_and_update(
                {"_id": oid},
                {"$set": updates},
                return_document=ReturnDocument.AFTER
            )
        if doc is None:
            raise NotFoundError("Submission not found")
        return TestResult.model_validate(to_public(doc))
