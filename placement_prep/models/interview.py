from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field

from .base import CamelModel


class InterviewStatus(str, Enum):
    PASSED = "Passed"
    FAILED = "Failed"
    PENDING = "Pending"


class InterviewBase(CamelModel):
    company: str = Field(..., min_length=1, max_length=100)
    role: str = Field(..., min_length=1)
    date: datetime
    package: str = ""
    status: InterviewStatus = InterviewStatus.PENDING
    notes: str = ""
    topics: List[str] = []


class InterviewCreate(InterviewBase):
    pass


class InterviewUpdate(CamelModel):
    company: Optional[str] = Field(None, min_length=1, max_length=100)
    role: Optional[str] = Field(None, min_length=1)
    date: Optional[datetime] = None
    package: Optional[str] = None
    status: Optional[InterviewStatus] = None
    notes: Optional[str] = None
    topics: Optional[List[str]] = None


class Interview(InterviewBase):
    id: str
    user: str
    created_at: Optional[datetime] = None


class PageMeta(CamelModel):
    total: int
    page: int
    pages: int
    limit: int


class InterviewPage(CamelModel):
    interviews: List[Interview]
    meta: PageMeta
