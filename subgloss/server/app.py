"""FastAPI application exposing the annotation pipeline over HTTP.

WHY: Clients without a local dictionary or MeCab installation can upload a
subtitle file and get the annotated ASS back. FastAPI provides request
validation, multipart upload handling, and OpenAPI docs.

HOW: The heavy resources (dictionary, analyzer, settings) are built once
by get_services() and injected into the routes with Depends, so tests can
replace them through app.dependency_overrides. The annotation route is a
plain ``def`` endpoint; FastAPI runs it in its thread pool.

RULES:
- POST /annotations accepts one .srt or .ass file (multipart field "file")
- Unsupported extension -> 400; unreadable/unparseable subtitle -> 422
- Analyzer failure -> 500; nothing is returned for that file
- Invalid server settings (colors, worker count) -> 503
- content is null when no caption was annotated
- Services come from SUBGLOSS_DICTIONARY / SUBGLOSS_CONFIG / SUBGLOSS_WORKERS
"""

from __future__ import annotations

import functools
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated

from fastapi import Depends, FastAPI, File, HTTPException, UploadFile

from subgloss import __version__
from subgloss.config import (
    DEFAULT_CONFIG_PATH,
    DEFAULT_DICTIONARY_PATH,
    DEFAULT_USER_DICTIONARY_PATH,
    DEFAULT_WORKERS,
    SUPPORTED_SUBTITLE_EXTENSIONS,
    AnnotationConfig,
    load_config,
)
from subgloss.core.dictionary import InMemoryDictionary, load_dictionary
from subgloss.core.pipeline import annotate_document
from subgloss.errors import (
    ConfigurationError,
    DictionaryLoadError,
    SubtitleFormatError,
    TokenizationError,
)
from subgloss.server.models import AnnotationResponse, ErrorResponse, HealthResponse
from subgloss.subtitles import parse_subtitle, to_ass
from subgloss.tokenizers import BaseTokenizer, build_tokenizer

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Resources shared by all requests (all read-only or thread-safe)."""

    tokenizer: BaseTokenizer
    index: InMemoryDictionary
    config: AnnotationConfig
    workers: int = 1


@functools.lru_cache(maxsize=1)
def get_services() -> Services:
    """Build the shared services from the environment, once per process."""
    if not DEFAULT_DICTIONARY_PATH:
        raise HTTPException(status_code=503, detail="SUBGLOSS_DICTIONARY is not configured")
    try:
        config = load_config(DEFAULT_CONFIG_PATH)
        return Services(
            tokenizer=build_tokenizer(
                user_dictionary=DEFAULT_USER_DICTIONARY_PATH,
                proper_nouns=config.proper_nouns,
            ),
            index=load_dictionary(DEFAULT_DICTIONARY_PATH),
            config=config,
            workers=DEFAULT_WORKERS,
        )
    except (ConfigurationError, DictionaryLoadError) as e:
        logger.exception("Cannot initialize annotation services")
        raise HTTPException(status_code=503, detail=str(e)) from e


app = FastAPI(
    title="Subgloss API",
    description=(
        "Upload SRT or ASS subtitles and receive ASS subtitles where dictionary "
        "words are highlighted and their definitions shown at the top of the screen."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)


@app.post(
    "/annotations",
    response_model=AnnotationResponse,
    tags=["annotations"],
    summary="Annotate a subtitle file",
    responses={
        400: {"model": ErrorResponse, "description": "Unsupported file type"},
        422: {"model": ErrorResponse, "description": "Subtitle file could not be parsed"},
        500: {"model": ErrorResponse, "description": "Morphological analyzer failure"},
        503: {"model": ErrorResponse, "description": "Dictionary, analyzer or settings not usable"},
    },
)
def create_annotation(
    file: Annotated[UploadFile, File(description="SRT or ASS subtitle file")],
    services: Annotated[Services, Depends(get_services)],
) -> AnnotationResponse:
    filename = file.filename or "upload.srt"
    ext = Path(filename).suffix.lower()
    if ext not in SUPPORTED_SUBTITLE_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail="Unsupported file type '{}'. Supported formats: {}".format(
                ext, ", ".join(sorted(SUPPORTED_SUBTITLE_EXTENSIONS))
            ),
        )

    try:
        content = file.file.read().decode("utf-8-sig")
        document = parse_subtitle(filename, content)
    except UnicodeDecodeError as e:
        raise HTTPException(status_code=422, detail="Subtitle file is not UTF-8: {}".format(e))
    except SubtitleFormatError as e:
        raise HTTPException(status_code=422, detail=str(e))

    try:
        count = annotate_document(
            document,
            services.tokenizer,
            services.index,
            services.config,
            max_workers=services.workers,
        )
    except ConfigurationError as e:
        logger.error("Annotation settings rejected for %s: %s", filename, e)
        raise HTTPException(status_code=503, detail=str(e))
    except TokenizationError as e:
        logger.exception("Annotation failed for %s", filename)
        raise HTTPException(status_code=500, detail=str(e))

    ass = None
    if count:
        ass = to_ass(document, services.config.subtitle_styles)

    return AnnotationResponse(
        filename=filename,
        captions=len(document),
        annotated_captions=count,
        content=ass,
    )


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["health"],
    summary="Health check",
    description="Liveness and readiness check; loads the dictionary on first call.",
)
def health_check(services: Annotated[Services, Depends(get_services)]) -> HealthResponse:
    return HealthResponse(status="ok", version=__version__, dictionary_entries=len(services.index))


def serve() -> None:
    """Entry point for ``python -m subgloss --serve`` and the subgloss-api script."""
    import uvicorn

    host = os.getenv("SUBGLOSS_HOST", "127.0.0.1")
    port = int(os.getenv("SUBGLOSS_PORT", "8000"))
    uvicorn.run(app, host=host, port=port)
