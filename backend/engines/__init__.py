from engines.streak import StreakUpdate, advance_streak, advance_cursor, normalize_cursor
from engines.options import shuffle_options
from engines.placement import PlacementEngine, score_answers, assign_level
from engines.tracking import ProgressTracker, study_today

__all__ = [
    "StreakUpdate",
    "advance_streak",
    "advance_cursor",
    "normalize_cursor",
    "shuffle_options",
    "PlacementEngine",
    "score_answers",
    "assign_level",
    "ProgressTracker",
    "study_today",
]
