"""Pydantic schemas for AI tutoring, code execution and generated exercises."""
from typing import Literal

from pydantic import BaseModel, Field

from codecraft.schemas.user import CamelModel


class ChatMessage(BaseModel):
    role: str
    content: str


class ValidateExercise(CamelModel):
    instructions: str = ""
    validation_prompt: str = ""


class ValidateSchema(BaseModel):
    code: str = ""
    exercise: ValidateExercise


class ValidationResult(CamelModel):
    is_correct: bool
    feedback: str = ""
    hints: list[str] = []


class ChatContext(CamelModel):
    topic: str = ""
    lesson_content: str | None = None


class ChatSchema(BaseModel):
    messages: list[ChatMessage] = []
    context: ChatContext = Field(default_factory=ChatContext)


class HintExercise(BaseModel):
    instructions: str = ""
    hints: list[str] = []


class HintSchema(CamelModel):
    code: str = ""
    exercise: HintExercise
    attempt_count: int = 0


class ExecuteSchema(BaseModel):
    code: str
    language: str


class ExecutionResult(CamelModel):
    stdout: str = ""
    stderr: str = ""
    exit_code: int | None = None


class GenerateSchema(BaseModel):
    language: str
    difficulty: str


class GeneratedExercise(CamelModel):
    """Exercise fields as returned by the completion service."""

    title: str
    description: str = ""
    instructions: str = ""
    starter_code: str = ""
    solution: str = ""
    expected_output: str = ""
    validation_prompt: str = ""
    hints: list[str] = []


class LanguageExercise(GeneratedExercise):
    id: str
    type: Literal["language"] = "language"
    language: str
    difficulty: str
    order: int = 0
    xp_reward: int
    lesson_id: str = ""
    module_id: str = ""
