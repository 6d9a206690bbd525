"""
Load the starter question set and print the bank's per-category counts.

    python -m placement_prep.seed
"""

import asyncio
import logging

from motor.motor_asyncio import AsyncIOMotorClient

from .config import settings
from .models.question import QuestionCreate
from .services.question_bank import QuestionBank

logger = logging.getLogger(__name__)

STARTER_QUESTIONS = [
    {
        "text": "A bag contains 3 red and 2 blue balls. One ball is drawn at random. What is probability it is red?",
        "options": ["1/5", "3/5", "2/5", "3/2"],
        "correct_index": 1,
        "explanation": "3 red out of total 5 gives 3/5.",
        "category": "Aptitude",
        "difficulty": "Easy",
        "topics": ["Probability"],
    },
    {
        "text": "If the perimeter of a square is 48 cm, what is its area?",
        "options": ["144 cm2", "144 cm", "256 cm2", "196 cm2"],
        "correct_index": 0,
        "explanation": "Side = 48/4 = 12; area = 12*12 = 144 cm^2.",
        "category": "Aptitude",
        "difficulty": "Easy",
        "topics": ["Geometry"],
    },
    {
        "text": "A and B share profits in the ratio 3:5. If the total profit is 800, what is B's share?",
        "options": ["300", "480", "500", "520"],
        "correct_index": 2,
        "explanation": "B gets 5/8 of 800 = 500.",
        "category": "Aptitude",
        "difficulty": "Medium",
        "topics": ["Ratios"],
    },
    {
        "text": "Which data structure offers average O(1) time for insert, delete and lookup?",
        "options": ["Array", "Linked List", "Hash Table", "Binary Tree"],
        "correct_index": 2,
        "explanation": "Hash tables offer average O(1) for these operations.",
        "category": "Coding",
        "difficulty": "Easy",
        "topics": ["Data Structures"],
    },
    {
        "text": "What does BFS (Breadth-First Search) use to keep track of nodes to visit?",
        "options": ["Stack", "Queue", "Priority Queue", "Set"],
        "correct_index": 1,
        "explanation": "BFS uses a queue to traverse by levels.",
        "category": "Coding",
        "difficulty": "Easy",
        "topics": ["Graphs", "Data Structures"],
    },
    {
        "text": "What is the worst-case time complexity of quicksort?",
        "options": ["O(n)", "O(n log n)", "O(n^2)", "O(log n)"],
        "correct_index": 2,
        "explanation": "A consistently bad pivot degrades quicksort to O(n^2).",
        "category": "Coding",
        "difficulty": "Medium",
        "topics": ["Algorithms"],
    },
    {
        "text": "Choose the word that best completes the sentence: 'Her argument was _____, convincing even the critics.'",
        "options": ["tenuous", "compelling", "vague", "irrelevant"],
        "correct_index": 1,
        "explanation": "Compelling means persuasive; fits the sentence.",
        "category": "Verbal",
        "difficulty": "Medium",
        "topics": ["Vocabulary"],
    },
    {
        "text": "Pick the synonym of 'candid'.",
        "options": ["frank", "secretive", "cautious", "polite"],
        "correct_index": 0,
        "explanation": "Candid means open and honest, i.e. frank.",
        "category": "Verbal",
        "difficulty": "Easy",
        "topics": ["Vocabulary"],
    },
]


async def seed(db) -> int:
    question_bank = QuestionBank(db)
    questions = [QuestionCreate.model_validate(q) for q in STARTER_QUESTIONS]
    return await question_bank.insert_many(questions)


async def run():
    client = AsyncIOMotorClient(settings.MONGODB_URI)
    try:
        db = client[settings.MONGODB_DB]
        inserted = await seed(db)
        print(f"Inserted {inserted} questions")

        counts = await QuestionBank(db).count_by_category()
        print(f"Total questions: {sum(counts.values())}")
        for category, count in counts.items():
            print(f"  {category}: {count}")
    finally:
        client.close()


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL)
    asyncio.run(run())
