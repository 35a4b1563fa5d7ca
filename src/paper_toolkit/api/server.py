"""
Module: api.server

Purpose:
    FastAPI application exposing POST /api/generate-pdf. The JSON body is
    validated, rendered by the builder and returned as a PDF attachment.

Key Functions:
    - create_app(): Build the application for a configuration
    - read_body_limited(): Collect a streamed body up to a byte limit
    - app: Application using the process-wide configuration

Status mapping:
    - 200: application/pdf, attachment "question_paper.pdf"
    - 400: undecodable JSON or invalid structure
    - 413: body larger than ``max_body_bytes``, declared or streamed
    - 500: generation failure, with details
"""

from __future__ import annotations

import json
import logging
import os
from typing import AsyncIterator, Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from paper_toolkit import __version__
from paper_toolkit.builder import PaperConfig, generate_pdf_async, get_config
from paper_toolkit.builder.config import with_overrides
from paper_toolkit.core.schemas import ValidationError, parse_paper
from paper_toolkit.core.schemas.validator import INVALID_STRUCTURE_MESSAGE

load_dotenv()

logger = logging.getLogger(__name__)

PDF_FILENAME = "question_paper.pdf"
GENERATION_FAILED_MESSAGE = "Failed to generate PDF"
BODY_TOO_LARGE_MESSAGE = "Request body too large"


class BodyTooLargeError(Exception):
    """Request body passed the configured limit while being read."""


async def read_body_limited(chunks: AsyncIterator[bytes], limit: int) -> bytes:
    """
    Collect a streamed request body.

    Reading stops at the first chunk that takes the total past ``limit``,
    so an oversized chunked upload is never buffered whole.

    Raises:
        BodyTooLargeError: Once more than ``limit`` bytes have arrived
    """
    body = bytearray()
    async for chunk in chunks:
        body.extend(chunk)
        if len(body) > limit:
            raise BodyTooLargeError(f"Body passed {limit} bytes")
    return bytes(body)


def _error(status_code: int, message: str, details: Optional[str] = None) -> JSONResponse:
    content = {"error": message}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def create_app(config: Optional[PaperConfig] = None) -> FastAPI:
    """
    Build the HTTP application.

    Image paths in requests are confined to the configured asset root,
    or to the working directory when none is configured.

    Args:
        config: Layout configuration; the process-wide config when None
    """
    config = config or get_config()
    if config.asset_root is None:
        config = with_overrides(config, asset_root=os.getcwd())
    logger.info(f"Request images restricted to {config.asset_root}")
    app = FastAPI(title="Question Paper PDF Generator", version=__version__)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    def read_root():
        return {"status": "Online"}

    @app.post("/api/generate-pdf")
    async def generate(request: Request):
        declared = request.headers.get("content-length")
        if declared is not None and declared.isdigit() and int(declared) > config.max_body_bytes:
            logger.warning(f"Rejected body of {declared} bytes (limit {config.max_body_bytes})")
            return _error(413, BODY_TOO_LARGE_MESSAGE)

        try:
            body = await read_body_limited(request.stream(), config.max_body_bytes)
        except BodyTooLargeError as e:
            logger.warning(f"Rejected streamed body: {e}")
            return _error(413, BODY_TOO_LARGE_MESSAGE)

        try:
            data = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(f"Undecodable request body: {e}")
            return _error(400, INVALID_STRUCTURE_MESSAGE)

        try:
            paper = parse_paper(data)
        except ValidationError as e:
            logger.warning(f"Invalid paper request at {e.path or 'root'}: {'; '.join(e.errors)}")
            return _error(400, str(e))

        try:
            result = await generate_pdf_async(paper, config)
        except Exception as e:
            logger.exception("PDF generation failed")
            return _error(500, GENERATION_FAILED_MESSAGE, str(e))

        return Response(
            content=result.pdf,
            media_type="application/pdf",
            headers={"Content-Disposition": f'attachment; filename="{PDF_FILENAME}"'},
        )

    return app


app = create_app()
