"""Closed value sets shared by models, engines and the API."""
from enum import Enum


class JLPTLevel(str, Enum):
    """Proficiency levels, easiest first."""
    N5 = "N5"
    N4 = "N4"
    N3 = "N3"
    N2 = "N2"
    N1 = "N1"


class VocabStatus(str, Enum):
    """Last known disposition of a word for a user."""
    LEARNING = "learning"
    KNOWN = "known"
    SKIPPED = "skipped"


DEFAULT_LEVEL = JLPTLevel.N5
