import json
import logging
from typing import Callable
from urllib.parse import urlsplit

from fastapi import APIRouter, Depends, Request, status
from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError

from linkshelf.dependencies import get_metadata_extractor
from linkshelf.schemas.common import ErrorResponse, error_response
from linkshelf.schemas.urls import MetadataRequest, UrlMetadata

LOGGER = logging.getLogger(__name__)

router = APIRouter(prefix="/urls", tags=["urls"])


def _is_web_url(url: str) -> bool:
    try:
        parts = urlsplit(url)
    except ValueError:
        return False
    return parts.scheme.lower() in {"http", "https"} and bool(parts.netloc)


def _parse_payload(raw_body: bytes) -> MetadataRequest:
    if not raw_body.strip():
        return MetadataRequest()
    data = json.loads(raw_body)
    if data is None:
        return MetadataRequest()
    return MetadataRequest.model_validate(data)


@router.post(
    "/extract-metadata",
    response_model=UrlMetadata,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def extract_metadata(
    request: Request,
    extractor: Callable[[str], UrlMetadata] = Depends(get_metadata_extractor),
):
    try:
        payload = _parse_payload(await request.body())
    except ValidationError:
        return error_response(status.HTTP_400_BAD_REQUEST, "URL is required")
    except ValueError:
        LOGGER.warning("Metadata request body is not valid JSON")
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to extract metadata"
        )

    url = payload.url
    if not url:
        return error_response(status.HTTP_400_BAD_REQUEST, "URL is required")
    if not _is_web_url(url):
        return error_response(status.HTTP_400_BAD_REQUEST, "URL must use http or https")
    try:
        return await run_in_threadpool(extractor, url)
    except Exception:
        LOGGER.exception("Metadata extraction failed url=%s", url)
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to extract metadata"
        )
