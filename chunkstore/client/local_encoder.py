"""
Caller-side local embedding encoder.

Runs all-MiniLM-L6-v2 in the caller's process to produce the 384-dim
vectors the server expects for the local provider. The server never runs
this model.

LocalEncoder is an explicit lifecycle object: it loads the model once,
shares one in-flight load between concurrent callers, keeps a failed load
failed until reset(), and reports progress to subscribers.

Dependencies: sentence-transformers (optional "local" extra)
System role: Local embedding provider for API callers
"""

import asyncio
import enum
import logging
from dataclasses import dataclass
from typing import Any, Callable

from chunkstore.configs.embeddings import EmbeddingSettings
from chunkstore.models.provider import LOCAL_DIMENSIONS

logger = logging.getLogger(__name__)

DEFAULT_LOCAL_MODEL = EmbeddingSettings.model_fields["local_model"].default


class EncoderState(str, enum.Enum):
    """Lifecycle state of a LocalEncoder."""

    UNLOADED = "unloaded"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class LoadProgress:
    """Progress update delivered to subscribers; progress runs 0-100."""

    state: EncoderState
    progress: int
    message: str


ProgressCallback = Callable[[LoadProgress], None]


class LocalEncoderError(Exception):
    """Raised when the local model cannot be loaded or produces a bad vector."""


def load_sentence_transformer(model_name: str) -> Any:
    """Load a SentenceTransformer model (blocking; run in a worker thread)."""
    from sentence_transformers import SentenceTransformer

    return SentenceTransformer(model_name)


class LocalEncoder:
    """
    Lifecycle owner for the local embedding model.

    Usage:
        encoder = LocalEncoder()
        unsubscribe = encoder.subscribe(lambda p: print(p.state, p.progress))
        vector = await encoder.embed("hello world")  # loads on first use
        unsubscribe()
    """

    def __init__(
        self,
        model_name: str = DEFAULT_LOCAL_MODEL,
        dimensions: int = LOCAL_DIMENSIONS,
        loader: Callable[[str], Any] = load_sentence_transformer,
    ) -> None:
        """
        Initialize an unloaded encoder.

        Args:
            model_name: Model identifier passed to the loader
            dimensions: Required output length
            loader: Blocking function returning a model with encode(text, normalize_embeddings=...)
        """
        self.model_name = model_name
        self.dimensions = dimensions
        self._loader = loader
        self._model: Any = None
        self._error: LocalEncoderError | None = None
        self._load_task: asyncio.Task | None = None
        self._subscribers: list[ProgressCallback] = []
        self._last = LoadProgress(EncoderState.UNLOADED, 0, "Model not loaded")

    @classmethod
    def from_settings(
        cls,
        settings: EmbeddingSettings | None = None,
        loader: Callable[[str], Any] = load_sentence_transformer,
    ) -> "LocalEncoder":
        """
        Build an encoder from EMBEDDING_LOCAL_MODEL and EMBEDDING_LOCAL_DIMENSIONS.

        Args:
            settings: Embedding settings; read from the environment when None
            loader: Model loader (tests pass a stub)
        """
        settings = settings or EmbeddingSettings()
        return cls(
            model_name=settings.local_model,
            dimensions=settings.local_dimensions,
            loader=loader,
        )

    @property
    def state(self) -> EncoderState:
        return self._last.state

    @property
    def progress(self) -> int:
        return self._last.progress

    @property
    def is_ready(self) -> bool:
        return self._model is not None

    def subscribe(self, callback: ProgressCallback) -> Callable[[], None]:
        """
        Register a progress callback.

        A subscriber joining after loading has started immediately receives
        the current state.

        Returns:
            Callable: Function that removes this subscription
        """
        self._subscribers.append(callback)
        if self._last.state is not EncoderState.UNLOADED:
            self._deliver(callback, self._last)
        return lambda: self.unsubscribe(callback)

    def unsubscribe(self, callback: ProgressCallback) -> None:
        """Remove a progress callback; unknown callbacks are ignored."""
        self._subscribers = [cb for cb in self._subscribers if cb is not callback]

    def _deliver(self, callback: ProgressCallback, update: LoadProgress) -> None:
        try:
            callback(update)
        except Exception:
            logger.exception("Progress subscriber raised", extra={"state": update.state.value})

    def _notify(self, state: EncoderState, progress: int, message: str) -> None:
        self._last = LoadProgress(state, progress, message)
        for callback in list(self._subscribers):
            self._deliver(callback, self._last)

    async def load(self) -> Any:
        """
        Load the model once and return it.

        Concurrent callers await the same load. A failed load stays failed
        until reset().

        Raises:
            LocalEncoderError: If the model could not be loaded
        """
        if self._model is not None:
            return self._model
        if self._error is not None:
            raise self._error
        if self._load_task is None:
            self._load_task = asyncio.create_task(self._load())
        return await asyncio.shield(self._load_task)

    async def _load(self) -> Any:
        self._notify(EncoderState.LOADING, 0, "Initializing model...")
        logger.info("Loading local embedding model", extra={"model": self.model_name})
        try:
            self._notify(EncoderState.LOADING, 10, f"Loading {self.model_name}...")
            model = await asyncio.to_thread(self._loader, self.model_name)
        except Exception as e:
            self._error = LocalEncoderError(f"Failed to load embedding model: {e}")
            self._load_task = None
            logger.error(
                "Local embedding model failed to load",
                extra={"model": self.model_name, "error_type": type(e).__name__},
            )
            self._notify(EncoderState.FAILED, 0, str(self._error))
            raise self._error from e

        self._model = model
        self._load_task = None
        logger.info("Local embedding model ready", extra={"model": self.model_name})
        self._notify(EncoderState.READY, 100, "Model ready")
        return model

    async def embed(self, text: str) -> list[float]:
        """
        Generate a normalized, mean-pooled embedding for text.

        Args:
            text: Non-empty input text

        Returns:
            list[float]: Vector of exactly ``dimensions`` floats

        Raises:
            ValueError: If text is empty
            LocalEncoderError: If loading fails or the output has the wrong length
        """
        if not text or not text.strip():
            raise ValueError("Text cannot be empty")

        model = await self.load()
        output = await asyncio.to_thread(model.encode, text, normalize_embeddings=True)
        embedding = [float(value) for value in output]

        if len(embedding) != self.dimensions:
            raise LocalEncoderError(
                f"Expected {self.dimensions} dimensions, got {len(embedding)}"
            )
        return embedding

    def reset(self) -> None:
        """Drop the loaded model and any sticky failure; subscribers are kept."""
        if self._load_task is not None and not self._load_task.done():
            self._load_task.cancel()
        self._load_task = None
        self._model = None
        self._error = None
        self._notify(EncoderState.UNLOADED, 0, "Model not loaded")
        logger.info("Local embedding model cleared", extra={"model": self.model_name})
