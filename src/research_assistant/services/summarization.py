"""Summarization service - one-shot summary of a research conversation."""

from research_assistant.clients.model import ModelClient, ModelClientError
from research_assistant.core.config import Settings
from research_assistant.observability import get_logger
from research_assistant.observability.constants import LogEvents
from research_assistant.schemas.requests import Message

logger = get_logger(__name__)

SUMMARY_SYSTEM_PROMPT = (
    "You are a research assistant that creates concise, informative summaries. "
    "Summarize the key findings, main topics discussed, and important conclusions "
    "from research conversations. Keep it brief but comprehensive."
)

EMPTY_SUMMARY = "Unable to generate summary"


class SummarizationError(Exception):
    """Error while generating a summary."""

    pass


class SummarizationService:
    """Summarizes a conversation transcript with a single non-streaming model call."""

    def __init__(self, model_client: ModelClient, settings: Settings):
        self.model_client = model_client
        self.settings = settings

    def build_messages(self, conversation: str) -> list[Message]:
        return [
            Message(role="system", content=SUMMARY_SYSTEM_PROMPT),
            Message(
                role="user",
                content=(
                    f"Please summarize this research conversation:\n\n{conversation}\n\n"
                    "Provide a concise summary highlighting:\n"
                    "1. Main topics discussed\n"
                    "2. Key findings\n"
                    "3. Important conclusions\n\n"
                    "Keep it under 150 words."
                ),
            ),
        ]

    async def summarize(self, conversation: str) -> str:
        """
        Summarize a conversation.

        Raises:
            SummarizationError: If the model call fails
        """
        try:
            result = await self.model_client.chat(
                model=self.settings.summary_model,
                messages=self.build_messages(conversation),
                temperature=self.settings.summary_temperature,
                max_tokens=self.settings.summary_max_tokens,
            )
        except ModelClientError as e:
            logger.error(LogEvents.SUMMARY_FAILED, status_code=e.status_code, error=str(e))
            raise SummarizationError(f"Summary generation failed: {e}") from e

        logger.info(LogEvents.SUMMARY_COMPLETED, latency_ms=result.latency_ms)
        return result.response.strip() or EMPTY_SUMMARY
