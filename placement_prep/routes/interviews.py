import math
import re
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from bson import ObjectId
from pymongo import DESCENDING, ReturnDocument

from ..models.interview import Interview, InterviewCreate, InterviewPage, InterviewUpdate
from ..models.user import User
from ..utils.database import as_object_id, get_database, storage_errors, to_public
from ..utils.security import get_current_user

router = APIRouter(prefix="/api/interviews", tags=["interviews"])


def _owned(interview_id: str, current_user: User) -> dict:
    oid = as_object_id(interview_id)
    if oid is None:
        raise HTTPException(status_code=404, detail="Interview not found")
    return {"_id": oid, "user": ObjectId(current_user.id)}


@router.post("", response_model=Interview, status_code=status.HTTP_201_CREATED)
async def create_interview(
    interview: InterviewCreate,
    current_user: User = Depends(get_current_user),
    db=Depends(get_database)
):
    doc = interview.model_dump(mode="python")
    doc["status"] = interview.status.value
    doc.update({
        "user": ObjectId(current_user.id),
        "created_at": datetime.utcnow(),
    })
    with storage_errors("interview insert"):
        result = await db["interviews"].insert_one(doc)
    doc["_id"] = result.inserted_id
    return to_public(doc)


@router.get("", response_model=InterviewPage)
async def get_interviews(
    page: int = 1,
    limit: int = 10,
    status_filter: Optional[str] = Query(None, alias="status"),
    q: str = "",
    upcoming: Optional[bool] = None,
    current_user: User = Depends(get_current_user),
    db=Depends(get_database)
):
    """
    List the user's interviews, newest date first, with optional status,
    company/role search and upcoming/past filters
    """
    page = max(1, page)
    limit = min(100, max(1, limit))

    query = {"user": ObjectId(current_user.id)}
    if status_filter:
        query["status"] = status_filter
    q = q.strip()
    if q:
        pattern = {"$regex": re.escape(q), "$options": "i"}
        query["$or"] = [{"company": pattern}, {"role": pattern}]
    if upcoming is True:
        query["date"] = {"$gte": datetime.utcnow()}
    elif upcoming is False:
        query["date"] = {"$lt": datetime.utcnow()}

    with storage_errors("interview listing"):
        total = await db["interviews"].count_documents(query)
        docs = await db["interviews"].find(query).sort("date", DESCENDING).skip(
            (page - 1) * limit
        ).limit(limit).to_list(length=limit)

    return {
        "interviews": [to_public(doc) for doc in docs],
        "meta": {
            "total": total,
            "page": page,
            "pages": max(1, math.ceil(total / limit)),
            "limit": limit,
        },
    }


@router.get("/{interview_id}", response_model=Interview)
async def get_interview_by_id(
    interview_id: str,
    current_user: User = Depends(get_current_user),
    db=Depends(get_database)
):
    with storage_errors("interview lookup"):
        doc = await db["interviews"].find_one(_owned(interview_id, current_user))
    if not doc:
        raise HTTPException(status_code=404, detail="Interview not found")
    return to_public(doc)


@router.put("/{interview_id}", response_model=Interview)
async def update_interview(
    interview_id: str,
    updates: InterviewUpdate,
    current_user: User = Depends(get_current_user),
    db=Depends(get_database)
):
    changes = updates.model_dump(exclude_unset=True)
    if "status" in changes and changes["status"] is not None:
        changes["status"] = updates.status.value

    with storage_errors("interview update"):
        if changes:
            doc = await db["interviews"].find_one_and_update(
                _owned(interview_id, current_user),
                {"$set": changes},
                return_document=ReturnDocument.AFTER
            )
        else:
            doc = await db["interviews"].find_one(_owned(interview_id, current_user))
    if not doc:
        raise HTTPException(status_code=404, detail="Interview not found or not allowed")
    return to_public(doc)


@router.delete("/{interview_id}")
async def delete_interview(
    interview_id: str,
    current_user: User = Depends(get_current_user),
    db=Depends(get_database)
):
    with storage_errors("interview delete"):
        doc = await db["interviews"].find_one_and_delete(_owned(interview_id, current_user))
    if not doc:
        raise HTTPException(status_code=404, detail="Interview not found or not allowed")
    return {"message": "Deleted"}
