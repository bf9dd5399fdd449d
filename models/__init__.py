from models.user import User
from models.generation_session import GenerationSession
from models.flashcard import Flashcard

__all__ = ["User", "GenerationSession", "Flashcard"]
