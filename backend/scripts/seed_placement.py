#!/usr/bin/env python3
"""Seed the placement test question bank.

Replaces every placement question with the contents of
data/content/ja/placement.yaml. The level ladder thresholds are tuned to
a bank of 5 N5, 5 N4, 5 N3, 3 N2 and 2 N1 questions, so any other
distribution is rejected.

Run with: python3 -m scripts.seed_placement
"""
import asyncio
from collections import Counter
from pathlib import Path

import yaml
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db_session, engine, Base
from models.enums import JLPTLevel
from models.placement import PlacementQuestion


BANK_FILE = Path(__file__).parent.parent.parent / "data" / "content" / "ja" / "placement.yaml"

EXPECTED_DISTRIBUTION = {
    JLPTLevel.N5.value: 5,
    JLPTLevel.N4.value: 5,
    JLPTLevel.N3.value: 5,
    JLPTLevel.N2.value: 3,
    JLPTLevel.N1.value: 2,
}


def load_question_bank(path: Path = BANK_FILE) -> list[dict]:
    """Parse and check the bank, returning questions in order_index order."""
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    questions = sorted(data.get("questions", []), key=lambda q: q["order_index"])

    for q in questions:
        JLPTLevel(q["difficulty_level"])
        if q["correct_answer"] in q.get("wrong_answers", []):
            raise ValueError(f"Question {q['order_index']}: correct answer repeated among distractors")

    distribution = dict(Counter(q["difficulty_level"] for q in questions))
    if distribution != EXPECTED_DISTRIBUTION:
        raise ValueError(f"Unexpected difficulty distribution {distribution}, want {EXPECTED_DISTRIBUTION}")

    return questions


async def replace_bank(session: AsyncSession, questions: list[dict]) -> int:
    await session.execute(delete(PlacementQuestion))
    for q in questions:
        session.add(PlacementQuestion(
            question_text=q["question_text"],
            correct_answer=q["correct_answer"],
            wrong_answers=q.get("wrong_answers", []),
            difficulty_level=q["difficulty_level"],
            order_index=q["order_index"],
        ))
    await session.flush()
    return len(questions)


async def main():
    """Run the placement seeder."""
    print("Creating tables...")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    questions = load_question_bank()
    async with get_db_session() as session:
        count = await replace_bank(session, questions)
        await session.commit()
    print(f"\nPlacement seeding complete: {count} questions")


if __name__ == "__main__":
    asyncio.run(main())
