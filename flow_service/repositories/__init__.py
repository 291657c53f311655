"""
MongoDB repositories for the bot-builder document store.
"""

from .base_repository import BaseRepository
from .bot_repository import BotRepository
from .submission_repository import SubmissionRepository
from .user_repository import UserRepository
from .workspace_repository import WorkspaceRepository
from .exceptions import (
    RepositoryError,
    EntityNotFoundError,
    InvalidIdentifierError,
)

__all__ = [
    "BaseRepository",
    "BotRepository",
    "SubmissionRepository",
    "UserRepository",
    "WorkspaceRepository",
    "RepositoryError",
    "EntityNotFoundError",
    "InvalidIdentifierError",
]
