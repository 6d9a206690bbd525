from enum import Enum
from typing import List

from pydantic import model_validator

from .base import CamelModel


class Category(str, Enum):
    APTITUDE = "Aptitude"
    CODING = "Coding"
    HR = "HR"
    VERBAL = "Verbal"
    TECHNICAL = "Technical"


class DifficultyLevel(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


class QuestionBase(CamelModel):
    text: str
    options: List[str] = []  # empty for coding / free-response items
    correct_index: int
    explanation: str = ""
    category: str
    difficulty: str = DifficultyLevel.MEDIUM.value
    topics: List[str] = []


class QuestionCreate(QuestionBase):
    category: Category
    difficulty: DifficultyLevel = DifficultyLevel.MEDIUM

    @model_validator(mode="after")
    def check_correct_index(self):
        if self.options and not 0 <= self.correct_index < len(self.options):
            raise ValueError("correctIndex must point into options")
        return self


class Question(QuestionBase):
    id: str

    @model_validator(mode="after")
    def default_topics(self):
        if not self.topics:
            self.topics = [self.category]
        return self


class QuestionStats(CamelModel):
    total: int
    by_category: dict
