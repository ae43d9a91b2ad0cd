import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

import uvicorn

from recognizer.config import (
    RECOGNIZER_HOST,
    RECOGNIZER_LOG_LEVEL,
    RECOGNIZER_PORT,
    RECOGNIZER_USAGE_FILE,
)
from recognizer.errors import RecognitionError
from recognizer.pipeline import RecognitionPipeline
from recognizer.quota import FileUsageStore, QuotaGate
from recognizer.results import present
from recognizer.schemas import Mode
from recognizer.storage import InlineStorage

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=RECOGNIZER_LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


async def recognize_file(image_path: str, mode: str) -> dict:
    """Recognize a local image file, sending it inline as a data URL.

    Args:
        image_path: Path to the image on disk
        mode: "movie" or "actor"

    Returns:
        The recognized record as a JSON-ready dict
    """
    path = Path(image_path)
    data = path.read_bytes()
    pipeline = RecognitionPipeline(quota=QuotaGate(FileUsageStore(RECOGNIZER_USAGE_FILE)))
    record = await pipeline.recognize_upload(data, path.name, mode, InlineStorage())
    return present(record)


def main(argv: list[str] | None = None) -> int:
    """Entry point: run the API server or recognize a single local image."""
    parser = argparse.ArgumentParser(prog="recognizer")
    sub = parser.add_subparsers(dest="cmd")

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default=RECOGNIZER_HOST)
    serve.add_argument("--port", type=int, default=RECOGNIZER_PORT)

    recognize = sub.add_parser("recognize", help="Recognize a local image file")
    recognize.add_argument("image", help="Path to the image")
    recognize.add_argument("--mode", default=Mode.MOVIE.value, choices=[m.value for m in Mode])

    args = parser.parse_args(argv)
    configure_logging()

    if args.cmd == "recognize":
        try:
            result = asyncio.run(recognize_file(args.image, args.mode))
        except OSError as e:
            print(f"Error: cannot read {args.image}: {e}", file=sys.stderr)
            return 1
        except RecognitionError as e:
            print(json.dumps(e.to_payload(), ensure_ascii=False), file=sys.stderr)
            return 1
        print(json.dumps(result, indent=2, ensure_ascii=False))
        return 0

    host = getattr(args, "host", RECOGNIZER_HOST)
    port = getattr(args, "port", RECOGNIZER_PORT)
    logger.info(f"Starting recognizer API on {host}:{port}")
    uvicorn.run("recognizer.api:create_app", factory=True, host=host, port=port, reload=False)
    return 0


if __name__ == "__main__":
    sys.exit(main())
