import asyncio
import logging
from typing import Any, List, Optional

import openai
from pydantic import TypeAdapter, ValidationError

from quizgen.config import Settings
from quizgen.errors import (
    EmptyUpstreamResponse,
    InvalidUpstreamFormat,
    NoTextProvided,
    UpstreamUnreachable,
)
from quizgen.models.quiz_models import GenerationRequest, QuizQuestion
from quizgen.utils.prompt_templates import build_quiz_prompt

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4"
# Some variety between runs, still mostly deterministic.
TEMPERATURE = 0.7

_QUESTION_LIST = TypeAdapter(List[QuizQuestion])


def build_generation_request(text: str, model: str = DEFAULT_MODEL) -> GenerationRequest:
    prompt = build_quiz_prompt(text)
    return GenerationRequest(model=model, messages=prompt.to_messages(), temperature=TEMPERATURE)


def parse_quiz_content(content: str) -> List[QuizQuestion]:
    """
    Decode the model's reply as a JSON array of questions.

    Malformed JSON and well-formed JSON of the wrong shape both raise
    InvalidUpstreamFormat. Decoded questions are returned as-is.
    """
    try:
        return _QUESTION_LIST.validate_json(content)
    except ValidationError as e:
        logger.error("Upstream content is not a question array: %r", content)
        raise InvalidUpstreamFormat(detail=str(e)) from e


def _first_message_content(choices: List[Any]) -> str:
    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None)
    return (content or "").strip()


class QuizGenerator:
    """
    Turns text into a quiz with one chat-completion call.

    There is no retry: every call costs tokens and produces a different quiz,
    so asking again is left to the caller. `max_concurrency` caps the number
    of calls in flight at once.
    """

    def __init__(self, client: Any, model: str = DEFAULT_MODEL, max_concurrency: int = 8):
        self.client = client
        self.model = model
        self._slots = asyncio.Semaphore(max_concurrency)

    @classmethod
    def from_settings(cls, settings: Settings) -> "QuizGenerator":
        client = openai.AsyncOpenAI(
            api_key=settings.openai_api_key.get_secret_value(),
            base_url=settings.openai_base_url,
            timeout=settings.openai_timeout,
            max_retries=0,
        )
        return cls(client, model=settings.openai_model, max_concurrency=settings.max_concurrent_generations)

    async def generate_quiz(self, text: Optional[str]) -> List[QuizQuestion]:
        if not text:
            raise NoTextProvided()

        request = build_generation_request(text, self.model)

        async with self._slots:
            try:
                completion = await self.client.chat.completions.create(**request.model_dump())
            except openai.APIError as e:
                logger.error("Error calling question generator: %s", e)
                raise UpstreamUnreachable(detail=str(e)) from e

        choices = getattr(completion, "choices", None)
        if not choices:
            logger.error("Question generator returned no choices")
            raise EmptyUpstreamResponse()

        questions = parse_quiz_content(_first_message_content(choices))
        logger.info("Generated %d questions from %d characters of text", len(questions), len(text))
        return questions
