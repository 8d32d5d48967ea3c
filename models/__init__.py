from models.flashcard import DIFFICULTIES, Flashcard
from models.study_session import StudySessionEvent
from models.topic import Topic
from models.user import User

__all__ = ["DIFFICULTIES", "Flashcard", "StudySessionEvent", "Topic", "User"]
