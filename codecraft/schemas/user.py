"""Pydantic schemas for users and progress (camelCase on the wire)."""
from typing import Any

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True


class UserOut(CamelModel):
    id: str
    email: str | None = None
    name: str
    avatar_url: str | None = None
    xp: int = 0
    level: int = 1
    streak: int = 0
    last_active_date: str | None = None
    completed_lessons: list[str] = []
    completed_exercises: list[str] = []
    module_progress: dict[str, Any] = {}
    lab_progress: dict[str, Any] = {}


class ProgressIn(CamelModel):
    """Full progress snapshot; omitted fields reset to their defaults."""

    xp: int = 0
    level: int = 1
    streak: int = 0
    last_active_date: str | None = None
    completed_lessons: list[str] = []
    completed_exercises: list[str] = []
    module_progress: dict[str, Any] = {}
    lab_progress: dict[str, Any] = {}


class LeaderboardEntry(BaseModel):
    id: str
    name: str
    avatar_url: str | None = None
    xp: int = 0
    level: int = 1
    streak: int = 0


class LeaderboardOut(BaseModel):
    users: list[LeaderboardEntry]
    total: int
