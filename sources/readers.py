"""Readers fetch raw text (or already-parsed data) for a resource."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Union

import httpx

from settings import get_settings

logger = logging.getLogger(__name__)

Reader = Callable[..., Any]


def api_reader(
    resource: str,
    options: Optional[Mapping[str, Any]] = None,
    client: Optional[httpx.Client] = None,
) -> str:
    """GET ``resource`` and return the response body; HTTP errors propagate."""
    options = dict(options or {})
    owned = client is None
    if client is None:
        client = httpx.Client(timeout=options.pop("timeout", get_settings().http_timeout))
    else:
        options.pop("timeout", None)
    try:
        logger.info("Fetching %s", resource)
        response = client.get(str(resource), **options)
        response.raise_for_status()
        return response.text
    finally:
        if owned:
            client.close()


def file_reader(resource: Union[str, Path], options: Optional[Mapping[str, Any]] = None) -> str:
    encoding = (options or {}).get("encoding", "utf-8")
    path = Path(resource)
    logger.info("Reading %s", path)
    return path.read_text(encoding=encoding)


def text_reader(resource: Any, options: Optional[Mapping[str, Any]] = None) -> Any:
    """Pass inline text or data straight through to the parser."""
    return resource


READERS: Dict[str, Reader] = {
    "api": api_reader,
    "file": file_reader,
    "text": text_reader,
}
