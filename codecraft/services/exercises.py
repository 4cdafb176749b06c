"""AI-generated practice exercises and the daily challenge rotation."""
import logging
import time
from datetime import date

from pydantic import ValidationError as SchemaError

from codecraft.core.errors import UpstreamFailure
from codecraft.schemas.ai import GeneratedExercise, LanguageExercise
from codecraft.services.deepseek import DeepSeekClient, extract_json_object

logger = logging.getLogger(__name__)

SUPPORTED_LANGUAGES = ["python", "javascript", "typescript", "rust", "go"]
DIFFICULTIES = ["easy", "medium", "hard"]
XP_REWARDS = {"easy": 50, "medium": 75, "hard": 100}

ROTATION_START = date(2024, 1, 1)


def build_exercise_prompt(language: str, difficulty: str) -> str:
    return f"""You are an expert programming instructor. Generate a coding exercise for a student learning {language}.

Difficulty: {difficulty}
- easy: Basic syntax, simple operations, single concept
- medium: Combine 2-3 concepts, moderate logic
- hard: Algorithm design, data structures, complex problem-solving

Respond with ONLY a JSON object (no markdown, no code fences):
{{
  "title": "Short title (3-6 words)",
  "description": "One sentence describing the task",
  "instructions": "Clear instructions (2-4 sentences). Specify expected output precisely.",
  "starterCode": "Minimal starter with guiding comments",
  "solution": "Complete working solution",
  "expectedOutput": "Exact expected stdout",
  "validationPrompt": "Specific criteria to validate the student's code",
  "hints": ["Gentle first hint", "More specific hint", "Almost gives the answer"]
}}

Rules:
- Self-contained: no imports, no file I/O, no user input, no external libraries
- Must produce output via print/console.log/println/fmt.Println
- Completable in 5-15 minutes
- The solution MUST produce exactly the expectedOutput"""


def parse_generated_exercise(text: str) -> GeneratedExercise:
    data = extract_json_object(text)
    try:
        if data is None:
            return GeneratedExercise.model_validate_json(text)
        return GeneratedExercise.model_validate(data)
    except SchemaError as e:
        logger.warning("Unparsable exercise from completion service: %s", e.error_count())
        raise UpstreamFailure("Failed to generate exercise") from e


async def generate_exercise(client: DeepSeekClient, language: str, difficulty: str) -> GeneratedExercise:
    reply = await client.complete(
        [
            {"role": "system", "content": build_exercise_prompt(language, difficulty)},
            {"role": "user", "content": "Generate a coding exercise."},
        ],
        max_tokens=1200,
        temperature=0.9,
    )
    return parse_generated_exercise(reply)


def to_language_exercise(data: GeneratedExercise, exercise_id: str, language: str, difficulty: str) -> LanguageExercise:
    return LanguageExercise(
        **data.model_dump(),
        id=exercise_id,
        language=language,
        difficulty=difficulty,
        xp_reward=XP_REWARDS[difficulty],
    )


def practice_exercise_id(language: str) -> str:
    return f"practice-{language}-{int(time.time() * 1000)}"


def daily_rotation(day: date) -> tuple[str, str]:
    """Language and difficulty for a date; both cycle from 2024-01-01."""
    index = (day - ROTATION_START).days
    return SUPPORTED_LANGUAGES[index % len(SUPPORTED_LANGUAGES)], DIFFICULTIES[index % len(DIFFICULTIES)]
