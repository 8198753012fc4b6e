import logging
from typing import Any, Dict, Optional

import httpx

from .config import Config


logger = logging.getLogger(__name__)


def build_client(timeout_seconds: Optional[float] = None) -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=timeout_seconds or Config.HTTP_TIMEOUT_SECONDS)


async def post_json(url: str, payload: Dict[str, Any], timeout_seconds: Optional[float] = None) -> httpx.Response:
    async with build_client(timeout_seconds) as client:
        return await client.post(
            url,
            json=payload,
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
        )


async def post_form(url: str, data: Dict[str, Any], timeout_seconds: Optional[float] = None) -> httpx.Response:
    async with build_client(timeout_seconds) as client:
        return await client.post(url, data=data)
