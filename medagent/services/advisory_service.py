"""Advisory retrieval: relay a symptom summary to Gemini, fall back on failure.

The API key stays on this service. Clients call the relay endpoints and never
see the key or the third-party URL.
"""

from medagent.config.prompts import ADVISORY_PROMPT, FALLBACK_ADVICE
from medagent.config.settings import settings
from medagent.models.assessment import AdvisoryResult, PatientRecord
from medagent.models.gemini import GenerateContentRequest, GenerateContentResponse
from medagent.models.triage import AdvisoryOrigin, RiskCategory
from medagent.utils.errors import RetrievalError
from medagent.utils.llm_helpers import invoke_with_timeout
from pydantic import ValidationError
from typing import Dict, Optional
import httpx
import logging

logger = logging.getLogger(__name__)


class AdvisoryService:
    """Builds the advisory prompt, calls the generation endpoint, and degrades
    to static per-risk text on any failure."""

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        api_key: Optional[str] = None,
        api_url: Optional[str] = None,
        timeout: Optional[float] = None,
        include_patient_name: Optional[bool] = None,
        max_words: Optional[int] = None,
        fallbacks: Optional[Dict[RiskCategory, str]] = None,
    ):
        if api_key is None and settings.gemini_api_key is not None:
            api_key = settings.gemini_api_key.get_secret_value()
        self.api_key = api_key or None
        self.api_url = api_url or settings.gemini_api_url
        self.timeout = timeout if timeout is not None else settings.advisory_timeout_seconds
        self.include_patient_name = (
            include_patient_name
            if include_patient_name is not None
            else settings.advisory_include_patient_name
        )
        self.max_words = max_words if max_words is not None else settings.advisory_max_words
        self.fallbacks = {**FALLBACK_ADVICE, **(fallbacks or {})}
        self._client = client

        logger.info(
            f"Advisory service initialized - key {'configured' if self.api_key else 'missing'}, "
            f"timeout {self.timeout}s"
        )

    def has_api_key(self) -> bool:
        return self.api_key is not None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def aclose(self) -> None:
        """Close the shared HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.info("Closed advisory HTTP client")

    def build_prompt(self, record: PatientRecord, risk: RiskCategory) -> str:
        """Natural-language summary of the record for the generation call."""
        patient_name = f" named {record.name}" if self.include_patient_name else ""
        return ADVISORY_PROMPT.format(
            patient_name=patient_name,
            age=record.age,
            symptoms=record.symptom_summary,
            max_words=self.max_words,
        )

    def fallback_for(self, risk: RiskCategory) -> AdvisoryResult:
        return AdvisoryResult(text=self.fallbacks[risk], origin=AdvisoryOrigin.FALLBACK)

    async def _request_generation(self, prompt: str) -> str:
        """
        POST the prompt and extract the generated text.

        Raises:
            RetrievalError: On missing key, transport error, non-2xx status or
                a body that does not match the response schema
        """
        if not self.api_key:
            raise RetrievalError("Gemini API key is not configured")

        body = GenerateContentRequest.from_prompt(prompt).model_dump()

        try:
            response = await self._get_client().post(
                self.api_url,
                params={"key": self.api_key},
                json=body,
                headers={"Content-Type": "application/json"},
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            raise RetrievalError(
                f"Generation request failed: {e.response.status_code}",
                status_code=e.response.status_code,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise RetrievalError(f"Generation request error: {type(e).__name__}")
        except ValueError:
            raise RetrievalError("Generation response was not valid JSON")

        try:
            text = GenerateContentResponse.model_validate(payload).text
        except ValidationError:
            raise RetrievalError("Invalid response format from generation API")

        if not text.strip():
            raise RetrievalError("Generation response contained no text")
        return text

    async def get_advisory(self, record: PatientRecord, risk: RiskCategory) -> AdvisoryResult:
        """
        Get advisory guidance for a classified record.

        Never raises for retrieval problems: every failure resolves to the
        fallback text configured for ``risk``.

        Args:
            record: Validated patient record
            risk: Category computed for the record

        Returns:
            AdvisoryResult with origin GENERATED or FALLBACK
        """
        prompt = self.build_prompt(record, risk)

        try:
            text = await invoke_with_timeout(
                self._request_generation(prompt), timeout=self.timeout
            )
        except RetrievalError as e:
            logger.warning(f"Advisory retrieval failed, using {risk.value} fallback: {e}")
            return self.fallback_for(risk)
        except Exception as e:
            logger.error(f"❌ Unexpected advisory error, using {risk.value} fallback: {e}", exc_info=True)
            return self.fallback_for(risk)

        logger.info(f"✅ Advisory generated ({len(text)} chars)")
        return AdvisoryResult(text=text, origin=AdvisoryOrigin.GENERATED)


# Global service instance
_advisory_service: Optional[AdvisoryService] = None


def get_advisory_service() -> AdvisoryService:
    """Get or create AdvisoryService instance."""
    global _advisory_service
    if _advisory_service is None:
        _advisory_service = AdvisoryService()
    return _advisory_service
