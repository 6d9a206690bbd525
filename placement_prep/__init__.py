"""
Placement Prep API: practice tests with scoring and topic breakdown,
interview tracking, mock interviews, resume storage and an admin review
console, served by FastAPI over MongoDB.
"""

__version__ = "1.0.0"
