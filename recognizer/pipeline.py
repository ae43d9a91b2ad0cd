"""Recognition request pipeline: quota -> prompt -> model call -> extraction."""

import asyncio
import json
import logging
import time

from recognizer.adapters import VisionAdapter, get_adapter
from recognizer.config import RECOGNIZER_REQUEST_TIMEOUT
from recognizer.errors import MissingInputError, QuotaExceededError, UpstreamError
from recognizer.extractor import extract
from recognizer.quota import QuotaDecision, QuotaGate
from recognizer.results import ResultCache
from recognizer.schemas import Mode, RecordModel, select_prompt
from recognizer.storage import Storage

logger = logging.getLogger(__name__)


class RecognitionPipeline:
    """Runs one recognition at a time against an injected adapter and quota gate.

    The quota check and the commit are separate steps, so concurrent calls on
    the same gate can overrun the ceiling. Callers that allow overlapping
    requests must serialize calls to ``recognize``.
    """

    def __init__(
        self,
        adapter: VisionAdapter | None = None,
        quota: QuotaGate | None = None,
        results: ResultCache | None = None,
        timeout: float | None = RECOGNIZER_REQUEST_TIMEOUT,
    ):
        self.adapter = adapter or get_adapter()
        self.quota = quota or QuotaGate()
        self.results = results or ResultCache()
        self.timeout = timeout

    def _ensure_allowed(self) -> None:
        if self.quota.check_and_reserve() is QuotaDecision.DENIED:
            raise QuotaExceededError(
                f"Daily limit of {self.quota.ceiling} recognitions reached; try again tomorrow"
            )

    async def recognize(self, image_url: str | None, mode: Mode | str) -> RecordModel:
        """Identify the movie or performer shown at ``image_url``.

        Args:
            image_url: Publicly fetchable image URL from the storage collaborator
            mode: "movie" or "actor"

        Returns:
            Validated MovieRecord or ActorRecord

        Raises:
            InvalidModeError, MissingInputError, QuotaExceededError,
            ConfigurationError, UpstreamError, EmptyReplyError, ParseError
        """
        mode = Mode.parse(mode)
        if not image_url or not image_url.strip():
            raise MissingInputError("No image URL")
        image_url = image_url.strip()

        self._ensure_allowed()

        prompt = select_prompt(mode)
        logger.info(f"Recognize request: mode={mode.value} image_url={image_url[:120]}")
        start_time = time.time()

        try:
            reply = await asyncio.wait_for(self.adapter.invoke(image_url, prompt), self.timeout)
        except asyncio.TimeoutError as e:
            logger.error(f"Model call exceeded {self.timeout}s for {image_url[:120]}")
            raise UpstreamError(f"Model call timed out after {self.timeout}s") from e

        logger.debug(f"Raw model output: {reply.raw_text!r}")
        record = extract(reply.raw_text, mode)

        usage = self.quota.commit()
        self.results.save(mode, record)

        elapsed_ms = int((time.time() - start_time) * 1000)
        logger.info(
            json.dumps(
                {
                    "event": "recognition_complete",
                    "mode": mode.value,
                    "model": reply.model_name,
                    "used_today": usage.count,
                    "elapsed_ms": elapsed_ms,
                }
            )
        )
        return record

    async def recognize_upload(
        self, data: bytes, filename: str, mode: Mode | str, storage: Storage
    ) -> RecordModel:
        """Store raw image bytes, then recognize the stored image.

        Mode and quota are checked before anything is stored.
        """
        mode = Mode.parse(mode)
        if not data:
            raise MissingInputError("No file uploaded")
        self._ensure_allowed()

        image_url = await storage.store(data, filename)
        return await self.recognize(image_url, mode)
