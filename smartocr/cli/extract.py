# =============================================================================
# smartocr/cli/extract.py -- CLI Extract Command
# =============================================================================
#
# Runs the OCR fallback chain on a local image file and prints the result.
#
#   python -m smartocr.cli.extract receipt.jpg               # text report
#   python -m smartocr.cli.extract notes.png --json          # JSON to stdout
#   python -m smartocr.cli.extract scan.tiff --policy single # override policy
#
# Exit codes: 0 success, 1 invalid input, 2 OCR failed, not configured or
# misconfigured.
# --json implies --quiet so log lines never mix with the JSON document.
# =============================================================================

"""Standalone CLI for extracting text from an image.

Usage::

    python -m smartocr.cli.extract /path/to/image.jpg
    python -m smartocr.cli.extract /path/to/image.png --json
    python -m smartocr.cli.extract image.webp --output result.json
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

import httpx
from pydantic import ValidationError

from smartocr.config.loader import load_config
from smartocr.config.settings import Settings
from smartocr.factory import build_ocr_service
from smartocr.models.ocr import ExtractionResult, OCRImage
from smartocr.models.policy import FallbackPolicy
from smartocr.utils.errors import SmartOCRError
from smartocr.utils.logging import configure_logging

_ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp", ".gif", ".bmp", ".tif", ".tiff"}
_CONTENT_TYPE_MAP = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".webp": "image/webp",
    ".gif": "image/gif",
    ".bmp": "image/bmp",
    ".tif": "image/tiff",
    ".tiff": "image/tiff",
}
_MAX_FILE_SIZE = 10 * 1024 * 1024  # 10 MB

EXIT_OK = 0
EXIT_INVALID_INPUT = 1
EXIT_OCR_FAILED = 2


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def _format_text_output(result: ExtractionResult) -> str:
    sep = "=" * 60
    lines = [
        sep,
        f"  Service: {result.service}  |  Confidence: {result.confidence:.0%}",
        f"  Processing time: {result.processing_time_ms:.0f} ms",
    ]
    for failure in result.failed_attempts:
        lines.append(f"  Skipped: {failure.service} ({failure.error})")
    lines.extend([sep, "", result.text, ""])
    return "\n".join(lines)


def _format_json_output(result: ExtractionResult) -> str:
    return json.dumps(result.model_dump(mode="json"), indent=2, ensure_ascii=False)


def _load_image(image_path: Path) -> OCRImage | str:
    """Validate and load *image_path*; return an error message on failure."""
    if not image_path.exists():
        return f"File not found: {image_path}"

    suffix = image_path.suffix.lower()
    if suffix not in _ALLOWED_EXTENSIONS:
        return (
            f"Unsupported file type: {suffix}. "
            f"Allowed: {', '.join(sorted(_ALLOWED_EXTENSIONS))}"
        )

    data = image_path.read_bytes()
    if len(data) > _MAX_FILE_SIZE:
        return f"File too large: {len(data):,} bytes. Maximum: {_MAX_FILE_SIZE:,} bytes."
    if not data:
        return f"File is empty: {image_path}"

    return OCRImage.from_bytes(data, filename=image_path.name, content_type=_CONTENT_TYPE_MAP[suffix])


# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------


async def _run(args: argparse.Namespace, settings: Settings, config: dict) -> int:
    loaded = _load_image(Path(args.image).expanduser().resolve())
    if isinstance(loaded, str):
        print(f"Error: {loaded}", file=sys.stderr)
        return EXIT_INVALID_INPUT

    async with httpx.AsyncClient(timeout=settings.http_timeout) as client:
        try:
            service = build_ocr_service(settings, config, http_client=client, policy=args.policy)
            result = await service.extract_text(loaded)
        except SmartOCRError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return EXIT_OCR_FAILED

    text = _format_json_output(result) if args.json_output else _format_text_output(result)
    if args.output:
        Path(args.output).write_text(text, encoding="utf-8")
        print(f"Result written to: {args.output}", file=sys.stderr)
    else:
        print(text)
    return EXIT_OK


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m smartocr.cli.extract",
        description="Extract text from an image using the configured OCR providers.",
    )
    parser.add_argument("image", type=str, help="Path to the image file.")
    parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Output the result as JSON instead of a text report.",
    )
    parser.add_argument(
        "--policy",
        choices=[p.value for p in FallbackPolicy],
        default=None,
        help="Override the configured fallback policy.",
    )
    parser.add_argument(
        "--config",
        type=str,
        default="config/config.yaml",
        help="Path to the YAML tunables file.",
    )
    parser.add_argument(
        "--output", "-o",
        type=str,
        default=None,
        help="Write the result to a file instead of stdout.",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only log warnings and errors (to stderr).",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point; returns the process exit code."""
    args = _build_parser().parse_args(argv)

    try:
        settings = Settings()
        config = load_config(args.config, settings=settings)
    except (ValidationError, SmartOCRError) as exc:
        print(f"Error: invalid configuration: {exc}", file=sys.stderr)
        return EXIT_OCR_FAILED

    quiet = args.quiet or args.json_output
    configure_logging(
        log_level="WARNING" if quiet else config["logging"]["level"],
        stream=sys.stderr,
        app_env=settings.app_env,
    )

    return asyncio.run(_run(args, settings, config))


if __name__ == "__main__":
    sys.exit(main())
