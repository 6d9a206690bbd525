"""
Random question sampling with same-category fallback.
"""

import logging
from datetime import datetime
from typing import Dict, Iterable, List

from pymongo import ASCENDING

from ..config import settings
from ..models.question import Question, QuestionCreate
from ..utils.database import as_object_id, storage_errors, to_public

logger = logging.getLogger(__name__)

# caller-facing category names that are stored under another name
CATEGORY_ALIASES = {
    "Technical": "Coding",
    "HR": "Verbal",
}


def resolve_category(category: str) -> str:
    return CATEGORY_ALIASES.get(category, category)


def clamp_count(count: int) -> int:
    return max(1, min(settings.MAX_QUESTION_LIMIT, int(count)))


class QuestionBank:
    def __init__(self, db):
        self.collection = db["questions"]

    async def sample(self, category: str, difficulty: str, count: int) -> List[Question]:
        """
        Draw up to `count` random questions of the given category and
        difficulty. When the exact pool is too small the rest is filled
        with random questions of the same category at other difficulties;
        returning fewer than requested is not an error.
        """
        size = clamp_count(count)
        resolved = resolve_category(category)
        logger.info(
            f"sample: requested category={category!r} resolved={resolved!r} "
            f"difficulty={difficulty!r} size={size}"
        )

        with storage_errors("question sampling"):
            docs = await self._sample({"category": resolved, "difficulty": difficulty}, size)
            if len(docs) < size:
                docs += await self._sample(
                    {"category": resolved, "difficulty": {"$ne": difficulty}},
                    size - len(docs)
                )

        return [Question.model_validate(to_public(doc)) for doc in docs[:size]]

    async def _sample(self, match: dict, size: int) -> List[dict]:
        pipeline = [
            {"$match": match},
            {"$sample": {"size": size}},
        ]
        return await self.collection.aggregate(pipeline).to_list(length=size)

    async def find_by_ids(self, ids: Iterable[str]) -> Dict[str, dict]:
        """
        Bulk-fetch questions keyed by their string id. Ids that are not
        valid ObjectIds or have no document are absent from the result.
        """
        object_ids = []
        for qid in dict.fromkeys(ids):
            oid = as_object_id(qid)
            if oid is not None:
                object_ids.append(oid)
        if not object_ids:
            return {}

        with storage_errors("question lookup"):
            docs = await self.collection.find({"_id": {"$in": object_ids}}).to_list(length=None)
        return {str(doc["_id"]): doc for doc in docs}

    async def count_by_category(self) -> Dict[str, int]:
        pipeline = [
            {"$group": {"_id": "$category", "count": {"$sum": 1}}},
            {"$sort": {"_id": ASCENDING}},
        ]
        with storage_errors("question counts"):
            groups = await self.collection.aggregate(pipeline).to_list(length=None)
        return {group["_id"]: group["count"] for group in groups}

    async def insert_many(self, questions: List[QuestionCreate]) -> int:
        """Insert questions whose text is not already in the bank."""
        texts = [q.text for q in questions]
        with storage_errors("question insert"):
            existing = await self.collection.find(
                {"text": {"$in": texts}}, {"text": 1}
            ).to_list(length=None)
            known = {doc["text"] for doc in existing}
            docs = []
            for question in questions:
                if question.text in known:
                    continue
                known.add(question.text)
                doc = question.model_dump(mode="json")
                doc["created_at"] = datetime.utcnow()
                docs.append(doc)
            if docs:
                await self.collection.insert_many(docs)
        return len(docs)
