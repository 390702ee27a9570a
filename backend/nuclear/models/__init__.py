"""
SQLAlchemy models. Import here so Alembic and app can use them.
"""
from nuclear.models.user import User
from nuclear.models.block import Block
from nuclear.models.folder import Folder
from nuclear.models.quiz import Quiz
from nuclear.models.question import Question
from nuclear.models.topic import Topic
from nuclear.models.fill_in_the_blank import FillInTheBlank
from nuclear.models.points_update import PointsUpdate

__all__ = ["User", "Block", "Folder", "Quiz", "Question", "Topic", "FillInTheBlank", "PointsUpdate"]
