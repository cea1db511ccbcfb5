"""Optional patient-friendly rephrasing of a finished analysis.

Sends an AnalysisResult to the OpenAI Responses API and returns prose that
restates the same findings in plain language. The analysis engine never
depends on this service; callers treat any failure as "refinement
unavailable" and keep the base result.
"""

import logging

from openai import AsyncOpenAI, OpenAIError

from lablens.config import settings
from lablens.schemas import AnalysisResult

logger = logging.getLogger(__name__)

REFINE_INSTRUCTIONS = (
    "You are a medical communication assistant. Convert technical lab result "
    "analysis into clear, patient-friendly language. Do not add new medical "
    "claims or advice. Simply rephrase the existing findings in an accessible "
    "way. Always remind users to consult their healthcare provider."
)


class RefinementError(Exception):
    """The refinement call failed or returned nothing usable."""


class RefinementUnavailableError(RefinementError):
    """Refinement is not configured (no OpenAI API key)."""


class RefinementService:
    """Rephrase analysis results through OpenAI.

    Example:
        service = RefinementService()
        text = await service.refine(result)
    """

    def __init__(
        self,
        client: AsyncOpenAI | None = None,
        model: str | None = None,
        max_output_tokens: int | None = None,
    ):
        """Initialize RefinementService.

        Args:
            client: Optional pre-configured AsyncOpenAI client (for testing).
                   If not provided, creates one from settings.
            model: Model to use. Defaults to settings.refine_model.
            max_output_tokens: Output cap. Defaults to settings.refine_max_output_tokens.

        Raises:
            RefinementUnavailableError: If no client provided and
                OPENAI_API_KEY is not configured.
        """
        if client is not None:
            self._client = client
        else:
            if not settings.openai_api_key:
                raise RefinementUnavailableError(
                    "AI refinement not available - OpenAI API key not configured"
                )
            self._client = AsyncOpenAI(api_key=settings.openai_api_key)

        self._model = model or settings.refine_model
        self._max_output_tokens = max_output_tokens or settings.refine_max_output_tokens

    async def close(self) -> None:
        """Close the OpenAI client connection."""
        await self._client.close()

    @staticmethod
    def build_input(result: AnalysisResult) -> str:
        """Format the analysis as the user message sent to the model."""
        return (
            "Please convert this lab analysis into patient-friendly language:\n\n"
            + result.model_dump_json(by_alias=True, indent=2)
        )

    async def refine(self, result: AnalysisResult) -> str:
        """Return a plain-language rendition of the analysis.

        Raises:
            RefinementError: If the API call fails or returns empty text.
        """
        try:
            response = await self._client.responses.create(
                model=self._model,
                instructions=REFINE_INSTRUCTIONS,
                input=self.build_input(result),
                max_output_tokens=self._max_output_tokens,
            )
        except OpenAIError as e:
            logger.warning("Refinement request failed: %s", e)
            raise RefinementError("Failed to refine analysis") from e

        text = (response.output_text or "").strip()
        if not text:
            raise RefinementError("Refinement returned no text")

        logger.info("Refined analysis with model=%s (%d chars)", self._model, len(text))
        return text
