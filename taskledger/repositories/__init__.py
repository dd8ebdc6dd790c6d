"""
TaskLedger — Repositories
"""

from .directory_repository import DirectoryRepository
from .task_repository import TaskRepository

__all__ = ["DirectoryRepository", "TaskRepository"]
