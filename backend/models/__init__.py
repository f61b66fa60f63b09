from models.enums import JLPTLevel, VocabStatus
from models.user import User
from models.vocabulary import Vocabulary
from models.progress import UserProgress, UserVocabStatus
from models.placement import PlacementQuestion, PlacementTestResult

__all__ = [
    "JLPTLevel", "VocabStatus",
    "User",
    "Vocabulary",
    "UserProgress", "UserVocabStatus",
    "PlacementQuestion", "PlacementTestResult",
]
