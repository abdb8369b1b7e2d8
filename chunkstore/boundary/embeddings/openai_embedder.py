"""
OpenAI embedding generator (server-side provider).

Generates 1536-dimensional embeddings with text-embedding-3-small.
Transient API failures are retried with exponential backoff; everything
else fails fast.

Dependencies: openai, tenacity, chunkstore.configs
System role: Remote embedding provider adapter
"""

import logging

from openai import (
    APIConnectionError,
    APITimeoutError,
    AsyncOpenAI,
    InternalServerError,
    OpenAIError,
    RateLimitError,
)
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from chunkstore.configs.embeddings import EmbeddingSettings
from chunkstore.core.exceptions import (
    DimensionMismatchError,
    EmbeddingGenerationFailedError,
    ProviderNotConfiguredError,
    ValidationError,
)
from chunkstore.models.provider import OPENAI_DIMENSIONS

logger = logging.getLogger(__name__)

TRANSIENT_ERRORS = (
    RateLimitError,
    APITimeoutError,
    APIConnectionError,
    InternalServerError,
)


def is_transient_error(error: BaseException) -> bool:
    """Rate limits, timeouts, connection drops and 5xx responses are retried."""
    return isinstance(error, TRANSIENT_ERRORS)


class OpenAIEmbedder:
    """
    OpenAI embeddings client with bounded retries.

    The SDK's own retry loop is disabled so that the retry budget
    (max_retries, doubling backoff from backoff_seconds) is applied here.
    """

    def __init__(
        self,
        api_key: str | None,
        model: str = "text-embedding-3-small",
        dimensions: int = OPENAI_DIMENSIONS,
        max_retries: int = 2,
        backoff_seconds: float = 1.0,
        timeout: float = 30.0,
        client: AsyncOpenAI | None = None,
    ) -> None:
        """
        Initialize OpenAI embedder.

        Args:
            api_key: OpenAI API key; None leaves the provider unconfigured
            model: Embedding model ID
            dimensions: Expected vector length
            max_retries: Retries after the first attempt for transient failures
            backoff_seconds: Wait before the first retry, doubled per retry
            timeout: Per-request timeout in seconds
            client: Preconfigured AsyncOpenAI client (tests, custom transports)
        """
        self._api_key = api_key
        self._client = client
        self.model = model
        self.dimensions = dimensions
        self.max_retries = max_retries
        self.backoff_seconds = backoff_seconds
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: EmbeddingSettings) -> "OpenAIEmbedder":
        """Build an embedder from EmbeddingSettings."""
        api_key = settings.openai_api_key.get_secret_value() if settings.openai_configured else None
        return cls(
            api_key=api_key,
            model=settings.openai_model,
            dimensions=settings.openai_dimensions,
            max_retries=settings.max_retries,
            backoff_seconds=settings.backoff_seconds,
            timeout=settings.request_timeout,
        )

    @property
    def is_configured(self) -> bool:
        """Whether credentials (or an injected client) are available."""
        return self._client is not None or bool(self._api_key)

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self._api_key,
                max_retries=0,
                timeout=self.timeout,
            )
        return self._client

    async def close(self) -> None:
        """Close the underlying HTTP client, if one was created."""
        if self._client is not None:
            await self._client.close()
            self._client = None

    def _log_retry(self, retry_state) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            f"{__name__}:embed - Retry {retry_state.attempt_number}/{self.max_retries} "
            f"after transient error",
            extra={
                "error_type": type(error).__name__ if error else None,
                "sleep_seconds": retry_state.next_action.sleep if retry_state.next_action else None,
            },
        )

    async def embed(self, text: str) -> list[float]:
        """
        Generate an embedding for text.

        Args:
            text: Non-empty input text

        Returns:
            list[float]: Vector of exactly ``dimensions`` floats

        Raises:
            ValidationError: If text is empty
            ProviderNotConfiguredError: If no API key is configured
            EmbeddingGenerationFailedError: On non-transient failure, exhausted
                retries or a malformed response
            DimensionMismatchError: If the returned vector has the wrong length
        """
        if not text or not text.strip():
            raise ValidationError("text cannot be empty", field="text")
        if not self.is_configured:
            raise ProviderNotConfiguredError("OPENAI_API_KEY is not configured")

        client = self._get_client()
        attempts = 0

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.max_retries + 1),
                wait=wait_exponential(multiplier=self.backoff_seconds, exp_base=2),
                retry=retry_if_exception(is_transient_error),
                before_sleep=self._log_retry,
                reraise=True,
            ):
                with attempt:
                    attempts = attempt.retry_state.attempt_number
                    response = await client.embeddings.create(model=self.model, input=text)
        except OpenAIError as e:
            logger.error(
                f"{__name__}:embed - OpenAI embedding generation failed",
                extra={"error_type": type(e).__name__, "attempts": attempts},
            )
            raise EmbeddingGenerationFailedError(
                f"OpenAI embedding generation failed after {attempts} attempt(s): "
                f"{type(e).__name__}",
                last_error=e,
                attempts=attempts,
            ) from e

        try:
            embedding = [float(value) for value in response.data[0].embedding]
        except (AttributeError, IndexError, TypeError, ValueError) as e:
            raise EmbeddingGenerationFailedError(
                "OpenAI returned a malformed embedding response",
                last_error=e,
                attempts=attempts,
            ) from e

        if len(embedding) != self.dimensions:
            raise DimensionMismatchError(
                self.dimensions, len(embedding), field="embedding_openai"
            )

        logger.debug(
            f"{__name__}:embed - Generated embedding",
            extra={"dimensions": len(embedding), "attempts": attempts},
        )
        return embedding
