"""FastAPI application exposing upload, recognition, usage and result endpoints."""

import asyncio
import logging

from fastapi import FastAPI, File, Request, UploadFile
from fastapi.responses import JSONResponse, Response
from fastapi.staticfiles import StaticFiles

from recognizer.config import RECOGNIZER_USAGE_FILE
from recognizer.errors import MissingInputError, RecognitionError
from recognizer.pipeline import RecognitionPipeline
from recognizer.quota import FileUsageStore, QuotaGate
from recognizer.results import present
from recognizer.schemas import Mode, RecognitionRequest
from recognizer.storage import LocalStorage, Storage

logger = logging.getLogger(__name__)


def create_app(
    pipeline: RecognitionPipeline | None = None,
    storage: Storage | None = None,
) -> FastAPI:
    """Build the API around an injected pipeline and storage collaborator."""
    pipeline = pipeline or RecognitionPipeline(quota=QuotaGate(FileUsageStore(RECOGNIZER_USAGE_FILE)))
    storage = storage or LocalStorage()
    # Quota check and commit are not atomic; one recognition runs at a time
    recognize_lock = asyncio.Lock()

    app = FastAPI(title="Recognizer API", version="0.1.0")
    app.state.pipeline = pipeline
    app.state.storage = storage

    @app.exception_handler(RecognitionError)
    async def recognition_error_handler(request: Request, exc: RecognitionError):
        logger.error(
            f"{request.method} {request.url.path} failed: {type(exc).__name__}: {exc.message}"
        )
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        """Catch-all exception handler to prevent stack traces in API responses."""
        logger.error(
            f"Unhandled exception in {request.method} {request.url.path}: {type(exc).__name__}: {exc}",
            exc_info=exc,
        )
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    @app.post("/api/upload")
    async def upload(file: UploadFile | None = File(None)):
        if file is None:
            raise MissingInputError("No file uploaded")
        if not (file.content_type or "").startswith("image/"):
            return JSONResponse(status_code=400, content={"error": "Only image files are accepted"})

        data = await file.read()
        if not data:
            raise MissingInputError("Uploaded file is empty")
        logger.info(f"File received: {file.filename} {len(data)} {file.content_type}")

        try:
            url = await storage.store(data, file.filename or "upload")
        except OSError as e:
            logger.error(f"Upload failed: {e}")
            return JSONResponse(status_code=500, content={"error": f"Upload failed: {e}"})

        # A new image invalidates whatever was recognized before
        pipeline.results.clear()
        return {"url": url}

    @app.post("/api/recognize")
    async def recognize(request: Request):
        try:
            body = await request.json()
        except ValueError:
            return JSONResponse(status_code=400, content={"error": "Request body must be JSON"})
        if not isinstance(body, dict):
            return JSONResponse(status_code=400, content={"error": "Request body must be a JSON object"})

        image_url = body.get("imageUrl")
        if not isinstance(image_url, str) or not image_url.strip():
            raise MissingInputError("No image URL")

        request_model = RecognitionRequest(image_url=image_url, mode=Mode.parse(body.get("mode")))
        async with recognize_lock:
            record = await pipeline.recognize(request_model.image_url, request_model.mode)
        return present(record)

    @app.get("/api/usage")
    async def usage():
        return pipeline.quota.snapshot()

    @app.get("/api/results/{mode}")
    async def last_result(mode: str):
        record = pipeline.results.get(Mode.parse(mode))
        if record is None:
            return JSONResponse(status_code=404, content={"error": f"No {mode} result yet"})
        return present(record)

    @app.delete("/api/results", status_code=204)
    async def clear_results():
        pipeline.results.clear()
        return Response(status_code=204)

    if isinstance(storage, LocalStorage):
        app.mount("/uploads", StaticFiles(directory=str(storage.root), check_dir=False), name="uploads")

    return app
