import logging
import os
import time
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from fastapi.responses import FileResponse, RedirectResponse
from bson import ObjectId
from pymongo import DESCENDING

from ..config import settings
from ..models.resume import Resume
from ..models.user import User
from ..utils.database import as_object_id, get_database, storage_errors, to_public
from ..utils.security import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/resume", tags=["resume"])

ALLOWED_MIME_TYPES = {
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}


def _owned(resume_id: str, current_user: User) -> dict:
    oid = as_object_id(resume_id)
    if oid is None:
        raise HTTPException(status_code=404, detail="Resume not found")
    return {"_id": oid, "user": ObjectId(current_user.id)}


@router.post("", response_model=Resume, status_code=status.HTTP_201_CREATED)
async def upload_resume(
    resume: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    db=Depends(get_database)
):
    """
    Store an uploaded PDF/DOC/DOCX resume on disk and record its metadata
    """
    if resume is None:
        raise HTTPException(status_code=400, detail="No file uploaded")
    if resume.content_type not in ALLOWED_MIME_TYPES:
        raise HTTPException(status_code=400, detail="Only PDF/DOC/DOCX allowed")

    content = await resume.read()
    if len(content) > settings.MAX_RESUME_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail="File too large"
        )

    # <epoch-ms>-<userId><ext>
    ext = os.path.splitext(resume.filename or "")[1]
    filename = f"{int(time.time() * 1000)}-{current_user.id}{ext}"
    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
    with open(os.path.join(settings.UPLOAD_DIR, filename), "wb") as f:
        f.write(content)

    doc = {
        "user": ObjectId(current_user.id),
        "filename": filename,
        "original_name": resume.filename or filename,
        "mime_type": resume.content_type,
        "size": len(content),
        "url": "",
        "created_at": datetime.utcnow(),
    }
    with storage_errors("resume insert"):
        result = await db["resumes"].insert_one(doc)
    doc["_id"] = result.inserted_id
    return to_public(doc)


@router.get("", response_model=List[Resume])
async def list_resumes(
    current_user: User = Depends(get_current_user),
    db=Depends(get_database)
):
    with storage_errors("resume listing"):
        docs = await db["resumes"].find(
            {"user": ObjectId(current_user.id)}
        ).sort("created_at", DESCENDING).to_list(length=None)
    return [to_public(doc) for doc in docs]


@router.get("/{resume_id}/file")
async def get_resume_file(
    resume_id: str,
    current_user: User = Depends(get_current_user),
    db=Depends(get_database)
):
    with storage_errors("resume lookup"):
        doc = await db["resumes"].find_one(_owned(resume_id, current_user))
    if not doc:
        raise HTTPException(status_code=404, detail="Resume not found")
    if doc.get("url"):
        return RedirectResponse(doc["url"])

    path = os.path.join(settings.UPLOAD_DIR, doc["filename"])
    if not os.path.isfile(path):
        raise HTTPException(status_code=404, detail="Resume file missing")
    return FileResponse(path, media_type=doc.get("mime_type"), filename=doc.get("original_name"))


@router.delete("/{resume_id}")
async def delete_resume(
    resume_id: str,
    current_user: User = Depends(get_current_user),
    db=Depends(get_database)
):
    with storage_errors("resume delete"):
        doc = await db["resumes"].find_one_and_delete(_owned(resume_id, current_user))
    if not doc:
        raise HTTPException(status_code=404, detail="Resume not found")

    if doc.get("filename"):
        path = os.path.join(settings.UPLOAD_DIR, doc["filename"])
        try:
            os.remove(path)
        except OSError as e:
            logger.warning(f"Failed to delete file {path}: {str(e)}")

    return {"message": "Deleted"}
