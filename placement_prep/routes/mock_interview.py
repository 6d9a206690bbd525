from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, status
from bson import ObjectId
from pymongo import DESCENDING

from ..models.mock_interview import MockInterview, MockStart, MockSubmit, MockType
from ..models.user import User
from ..services.grading import percent
from ..utils.database import as_object_id, get_database, storage_errors, to_public
from ..utils.errors import ForbiddenError, NotFoundError, ValidationFailure
from ..utils.security import get_current_user

router = APIRouter(prefix="/api/mock", tags=["mock interviews"])

HR_QUESTIONS = [
    "Tell me about yourself.",
    "Why should we hire you?",
    "Describe a challenging situation you faced and how you handled it.",
    "What are your strengths and weaknesses?",
    "Where do you see yourself in five years?",
]

TECH_QUESTIONS = [
    "Explain the concept of closures in JavaScript.",
    "What is REST API and how does it work?",
    "Describe normalization in databases.",
    "Explain the difference between HTTP and HTTPS.",
    "What are React hooks and why are they useful?",
]

QUESTION_SETS = {
    MockType.HR.value: HR_QUESTIONS,
    MockType.TECHNICAL.value: TECH_QUESTIONS,
}

PENDING_FEEDBACK = "Responses recorded. Awaiting review."


@router.post("/start", response_model=MockInterview, status_code=status.HTTP_201_CREATED)
async def start_mock(
    request: MockStart,
    current_user: User = Depends(get_current_user),
    db=Depends(get_database)
):
    if request.type not in QUESTION_SETS:
        raise ValidationFailure("Invalid mock interview type")

    doc = {
        "user": ObjectId(current_user.id),
        "type": request.type,
        "questions": list(QUESTION_SETS[request.type]),
        "responses": [],
        "feedback": "",
        "score": 0,
        "submitted_at": datetime.utcnow(),
    }
    with storage_errors("mock interview insert"):
        result = await db["mock_interviews"].insert_one(doc)
    doc["_id"] = result.inserted_id
    return to_public(doc)


@router.post("/submit", response_model=MockInterview)
async def submit_mock(
    submission: MockSubmit,
    current_user: User = Depends(get_current_user),
    db=Depends(get_database)
):
    """
    Store the answers and give a provisional score: the share of questions
    that received a non-blank response
    """
    if not submission.interview_id or submission.responses is None:
        raise ValidationFailure("Missing fields")

    oid = as_object_id(submission.interview_id)
    if oid is None:
        raise NotFoundError("Interview not found")
    with storage_errors("mock interview lookup"):
        interview = await db["mock_interviews"].find_one({"_id": oid})
    if not interview:
        raise NotFoundError("Interview not found")
    if str(interview["user"]) != current_user.id:
        raise ForbiddenError()

    answered = len([r for r in submission.responses if r and r.strip()])
    updates = {
        "responses": submission.responses,
        "score": percent(answered, len(interview.get("questions") or [])),
        "feedback": PENDING_FEEDBACK,
    }
    with storage_errors("mock interview update"):
        await db["mock_interviews"].update_one({"_id": oid}, {"$set": updates})
    interview.update(updates)
    return to_public(interview)


@router.get("", response_model=List[MockInterview])
async def get_mocks(
    current_user: User = Depends(get_current_user),
    db=Depends(get_database)
):
    with storage_errors("mock interview listing"):
        docs = await db["mock_interviews"].find(
            {"user": ObjectId(current_user.id)}
        ).sort("submitted_at", DESCENDING).to_list(length=None)
    return [to_public(doc) for doc in docs]
