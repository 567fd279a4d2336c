"""
Question answering service business logic.
"""

import logging
from typing import Any, Optional

from aurora_qa.core.cache import MessageCache
from aurora_qa.exceptions import InvalidQuestionError
from aurora_qa.services.answer_synthesizer import AnswerSynthesizer
from aurora_qa.services.fetcher import MessageFetcher
from aurora_qa.services.question_parser import parse_question

logger = logging.getLogger(__name__)


EXAMPLE_QUESTIONS = [
    "When is Layla planning her trip to London?",
    "How many cars does Vikram Desai have?",
    "What are Amira's favorite restaurants?",
]


class QAService:
    """Service for answering questions over the cached message set."""

    def __init__(
        self,
        cache: Optional[MessageCache] = None,
        synthesizer: Optional[AnswerSynthesizer] = None,
    ):
        self.cache = cache if cache is not None else MessageCache(MessageFetcher())
        self.synthesizer = synthesizer or AnswerSynthesizer()

    @staticmethod
    def validate_question(question: Any) -> str:
        if not question or not isinstance(question, str):
            raise InvalidQuestionError("Question field is required and must be a string")

        question = question.strip()
        if not question:
            raise InvalidQuestionError("Question cannot be empty")
        return question

    async def ask(self, question: Any) -> str:
        """
        Answer a natural-language question.

        Args:
            question: Raw question value from the request body

        Returns:
            Answer text

        Raises:
            InvalidQuestionError: If the question is missing, not a string or blank
            ConcurrentFetchError: If the cache is being populated by another request
            FetchError: If the upstream fetch failed outright
        """
        question = self.validate_question(question)
        logger.info(f"Question received: '{question}'")

        messages = await self.cache.get_all()
        parsed = parse_question(question)
        logger.info(f"[QA] Classified as {parsed.intent.value}: {parsed}")

        return self.synthesizer.answer(parsed, messages)

    @staticmethod
    def usage() -> dict:
        return {
            "message": "Question Answering API",
            "usage": 'Send POST request with JSON body: { "question": "your question here" }',
            "examples": list(EXAMPLE_QUESTIONS),
        }


qa_service = QAService()


def get_qa_service() -> QAService:
    return qa_service
