#!/usr/bin/env python3
"""Seed vocabulary from the per-level YAML files.

Reads data/content/ja/vocabulary/<level>.yaml and replaces each level's
words in the database. Index positions must run 0..n-1 without gaps,
since the daily word cursor walks them in order.

Run with: python3 -m scripts.seed_vocabulary [N5 N4 ...]
"""
import asyncio
import sys
from pathlib import Path

import yaml
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db_session, engine, Base
from models.enums import JLPTLevel
from models.vocabulary import Vocabulary


VOCAB_DIR = Path(__file__).parent.parent.parent / "data" / "content" / "ja" / "vocabulary"


def load_level_file(path: Path) -> tuple[JLPTLevel, list[dict]]:
    """Parse one level file, returning its level and words in cursor order."""
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    level = JLPTLevel(data["level"])
    words = sorted(data.get("words", []), key=lambda w: w["index_position"])

    positions = [w["index_position"] for w in words]
    if positions != list(range(len(words))):
        raise ValueError(f"{path.name}: index_position must run 0..{len(words) - 1} without gaps")

    for entry in words:
        missing = {"word", "reading", "short_meaning"} - entry.keys()
        if missing:
            raise ValueError(f"{path.name}: word at {entry['index_position']} missing {sorted(missing)}")

    return level, words


async def replace_level(session: AsyncSession, level: JLPTLevel, words: list[dict]) -> int:
    """Delete a level's words and insert ``words`` in their place."""
    await session.execute(delete(Vocabulary).where(Vocabulary.jlpt_level == level.value))
    for entry in words:
        session.add(Vocabulary(
            word=entry["word"],
            reading=entry["reading"],
            short_meaning=entry["short_meaning"],
            detailed_explanation=entry.get("detailed_explanation", ""),
            example_sentences=entry.get("example_sentences", []),
            usage_notes=entry.get("usage_notes", ""),
            jlpt_level=level.value,
            index_position=entry["index_position"],
        ))
    await session.flush()
    return len(words)


async def main(levels: list[str] | None = None):
    """Run the vocabulary seeder."""
    print("Creating tables...")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    wanted = {JLPTLevel(level.upper()) for level in levels} if levels else None
    files = sorted(VOCAB_DIR.glob("*.yaml"))
    if not files:
        print(f"No vocabulary files found in {VOCAB_DIR}")
        return

    async with get_db_session() as session:
        for path in files:
            level, words = load_level_file(path)
            if wanted and level not in wanted:
                continue
            count = await replace_level(session, level, words)
            print(f"  {level.value}: {count} words")
        await session.commit()
    print("\nVocabulary seeding complete")


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1:]))
