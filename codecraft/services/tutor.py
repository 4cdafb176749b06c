"""Prompt construction for code validation, tutoring chat and hints."""
from codecraft.schemas.ai import ChatSchema, HintSchema, ValidateSchema, ValidationResult

VALIDATION_FALLBACK = ValidationResult(
    is_correct=False,
    feedback="Could not validate. Please try again.",
    hints=[],
)


def validation_messages(body: ValidateSchema) -> list[dict[str, str]]:
    system_prompt = f"""You are a React/TypeScript code validator for a learning app. Your job is to check if the student's code correctly solves the exercise.

Exercise instructions: {body.exercise.instructions}
Validation criteria: {body.exercise.validation_prompt}

Respond in JSON format only:
{{
  "isCorrect": boolean,
  "feedback": "Brief, encouraging feedback (1-2 sentences)",
  "hints": ["optional hint if wrong"]
}}

Be encouraging but accurate. If mostly correct with minor issues, still mark as correct but mention improvements."""

    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": f"Student's code:\n```jsx\n{body.code}\n```"},
    ]


def chat_messages(body: ChatSchema) -> list[dict[str, str]]:
    lesson = ""
    if body.context.lesson_content:
        lesson = f"Current lesson content:\n{body.context.lesson_content}\n"

    system_prompt = f"""You are a friendly React & TypeScript tutor helping a beginner learn. Current topic: {body.context.topic}.

{lesson}
Guidelines:
- Keep responses concise (2-4 sentences usually)
- Use simple language, avoid jargon
- Give practical examples when helpful
- Be encouraging and supportive
- If asked something off-topic, gently redirect to React/TypeScript"""

    return [
        {"role": "system", "content": system_prompt},
        *({"role": m.role, "content": m.content} for m in body.messages),
    ]


def hint_messages(body: HintSchema) -> list[dict[str, str]]:
    # hints the student has already unlocked, one per failed attempt
    shown = body.exercise.hints[: max(0, min(body.attempt_count, len(body.exercise.hints)))]

    system_prompt = f"""You are helping a student with a React exercise. Give ONE short, helpful hint.

Exercise: {body.exercise.instructions}
Previous hints given: {", ".join(shown) or "none"}
Attempt number: {body.attempt_count}

Be more specific with each attempt. Don't give the answer directly."""

    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": f"My current code:\n{body.code}\n\nI need a hint!"},
    ]
