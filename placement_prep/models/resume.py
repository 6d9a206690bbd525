from datetime import datetime
from typing import Optional

from .base import CamelModel


class Resume(CamelModel):
    id: str
    user: str
    filename: str
    original_name: str
    mime_type: Optional[str] = None
    size: Optional[int] = None
    url: str = ""
    created_at: Optional[datetime] = None
