from datetime import datetime
from enum import Enum
from typing import List, Optional, Union

from .base import CamelModel
from .user import UserSummary


class MockType(str, Enum):
    HR = "HR"
    TECHNICAL = "Technical"


class MockStart(CamelModel):
    type: Optional[str] = None


class MockSubmit(CamelModel):
    interview_id: Optional[str] = None
    responses: Optional[List[Optional[str]]] = None


class MockInterview(CamelModel):
    id: str
    user: str
    type: MockType
    questions: List[str]
    responses: List[Optional[str]] = []
    feedback: str = ""
    score: int = 0
    submitted_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None


class AdminMockInterview(MockInterview):
    user: Optional[Union[UserSummary, str]] = None


class MockReview(CamelModel):
    score: Optional[float] = None
    feedback: Optional[str] = None
