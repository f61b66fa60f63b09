"""Tests for the seed loaders and the shipped content files."""
from pathlib import Path

import pytest
from sqlalchemy import select

from models import Vocabulary
from scripts.seed_placement import load_question_bank
from scripts.seed_vocabulary import VOCAB_DIR, load_level_file, replace_level


def test_question_bank_distribution():
    questions = load_question_bank()
    assert len(questions) == 20
    assert [q["order_index"] for q in questions] == list(range(1, 21))
    for q in questions:
        assert q["correct_answer"] not in q["wrong_answers"]


def test_question_bank_rejects_wrong_distribution(tmp_path: Path):
    bank = tmp_path / "placement.yaml"
    bank.write_text(
        "questions:\n"
        "  - question_text: q\n"
        "    correct_answer: a\n"
        "    wrong_answers: [b, c, d]\n"
        "    difficulty_level: N5\n"
        "    order_index: 1\n",
        encoding="utf-8",
    )
    with pytest.raises(ValueError):
        load_question_bank(bank)


@pytest.mark.parametrize("path", sorted(VOCAB_DIR.glob("*.yaml")), ids=lambda p: p.stem)
def test_vocabulary_files_are_contiguous(path: Path):
    level, words = load_level_file(path)
    assert words
    assert [w["index_position"] for w in words] == list(range(len(words)))
    assert path.stem.upper() == level.value


def test_gap_in_positions_is_rejected(tmp_path: Path):
    level_file = tmp_path / "n5.yaml"
    level_file.write_text(
        "level: N5\n"
        "words:\n"
        "  - {word: a, reading: a, short_meaning: a, index_position: 0}\n"
        "  - {word: b, reading: b, short_meaning: b, index_position: 2}\n",
        encoding="utf-8",
    )
    with pytest.raises(ValueError):
        load_level_file(level_file)


async def test_replace_level_swaps_words(db):
    level, words = load_level_file(VOCAB_DIR / "n5.yaml")
    await replace_level(db, level, words)
    await replace_level(db, level, words[:2])
    await db.commit()

    result = await db.execute(select(Vocabulary).where(Vocabulary.jlpt_level == "N5"))
    rows = result.scalars().all()
    assert len(rows) == 2
    assert all(row.example_sentences for row in rows)
