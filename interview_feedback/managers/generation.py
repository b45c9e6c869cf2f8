from typing import Dict, List, Optional, Type, TypeVar

import openai
import structlog
from openai import AsyncOpenAI
from pydantic import BaseModel, ValidationError

from ..application.schemas import CATEGORY_NAMES, FeedbackEvaluation, IdealAnswer
from ..core.config import Settings, get_settings
from ..core.exceptions import GenerationError, SchemaViolationError
from ..core.interfaces import FeedbackGenerator

logger = structlog.get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

EVALUATION_SYSTEM_PROMPT = (
    "You are a professional interviewer analyzing a mock interview. Your task is to "
    "evaluate the candidate based on structured categories."
)

RUBRIC = {
    "Communication Skills": "Clarity, articulation, structured responses.",
    "Technical Knowledge": "Understanding of key concepts for the role.",
    "Problem Solving": "Ability to analyze problems and propose solutions.",
    "Cultural Fit": "Alignment with company values and job role.",
    "Confidence and Clarity": "Confidence in responses, engagement, and clarity.",
}

EVALUATION_SCHEMA_HINT = """Respond with a JSON object of exactly this shape:
{
  "totalScore": <integer 0-100>,
  "categoryScores": [{"name": <category name>, "score": <integer 0-100>, "comment": <string>}, ...],
  "strengths": [<string>, ...],
  "areasForImprovement": [<string>, ...],
  "finalAssessment": <string>
}
categoryScores must contain the five categories above, once each, in the listed order."""

IDEAL_ANSWER_SCHEMA_HINT = 'Respond with a JSON object of exactly this shape: {"modelAnswer": <string>}'


class OpenAIFeedbackGenerator(FeedbackGenerator):
    """Rubric scoring and ideal answers from an OpenAI chat model."""

    def __init__(self, settings: Optional[Settings] = None, client: Optional[AsyncOpenAI] = None):
        self.settings = settings or get_settings()
        self._client = client

    @property
    def client(self) -> AsyncOpenAI:
        # Created on first use so the app can start without an API key
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self.settings.OPENAI_API_KEY,
                timeout=self.settings.GENERATION_TIMEOUT_SECONDS,
                max_retries=0,
            )
        return self._client

    async def generate_evaluation(self, transcript: str) -> FeedbackEvaluation:
        """Score the whole interview once against the fixed rubric."""
        messages = [
            {"role": "system", "content": EVALUATION_SYSTEM_PROMPT},
            {"role": "user", "content": self._create_evaluation_prompt(transcript)},
        ]
        evaluation = await self._complete_json(
            messages, FeedbackEvaluation, model=self.settings.AI_MODEL, temperature=0.3
        )
        logger.info("evaluation_generated", total_score=evaluation.total_score)
        return evaluation

    async def generate_ideal_answer(self, question: str) -> str:
        """Ask for a concise model answer to one interview question."""
        messages = [{"role": "user", "content": self._create_ideal_answer_prompt(question)}]
        answer = await self._complete_json(
            messages, IdealAnswer, model=self.settings.IDEAL_ANSWER_MODEL, temperature=0.7
        )
        return answer.model_answer

    async def _complete_json(self,
                             messages: List[Dict[str, str]],
                             schema: Type[ModelT],
                             model: str,
                             temperature: float) -> ModelT:
        try:
            response = await self.client.chat.completions.create(
                model=model,
                messages=messages,
                temperature=temperature,
                response_format={"type": "json_object"},
            )
        except openai.OpenAIError as e:
            logger.error("generation_request_failed", model=model, error=str(e))
            raise GenerationError(f"{model} request failed: {e}") from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise SchemaViolationError(f"{model} returned an empty response")

        try:
            return schema.model_validate_json(content)
        except ValidationError as e:
            logger.warning("generation_schema_mismatch", model=model, schema=schema.__name__,
                           errors=e.error_count())
            raise SchemaViolationError(f"{model} response does not match {schema.__name__}",
                                       raw=content) from e

    def _create_evaluation_prompt(self, transcript: str) -> str:
        categories = "\n".join(f"- **{name}**: {RUBRIC[name]}" for name in CATEGORY_NAMES)
        return (
            "You are an AI interviewer analyzing a mock interview. Evaluate the candidate "
            "based on structured categories. Be thorough and detailed in your analysis. "
            "Don't be lenient with the candidate. If there are mistakes or areas for "
            "improvement, point them out.\n"
            f"Transcript:\n{transcript}\n"
            "Score the candidate from 0 to 100 in the following areas. Do not add "
            f"categories other than the ones provided:\n{categories}\n\n"
            f"{EVALUATION_SCHEMA_HINT}"
        )

    def _create_ideal_answer_prompt(self, question: str) -> str:
        return (
            "As an expert interviewer, provide a concise, professional model answer to the "
            "following interview question. The answer should be technically accurate, "
            "well-structured, and demonstrate deep knowledge.\n\n"
            f'Question: "{question}"\n\n'
            "Provide a model answer that would impress an interviewer. Keep it under 150 words.\n"
            f"{IDEAL_ANSWER_SCHEMA_HINT}"
        )
