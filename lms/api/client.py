"""
HTTP client for the LMS backend API
"""

import logging
from typing import Optional

import httpx

from lms.config import config
from lms.errors import ApiError

logger = logging.getLogger(__name__)


# Shared client
_client: Optional[httpx.AsyncClient] = None


async def get_client() -> httpx.AsyncClient:
    """Get the shared client (created on first call)"""
    global _client

    if _client is None:
        _client = httpx.AsyncClient(
            base_url=config.API_URL.rstrip("/") + "/",
            timeout=config.API_TIMEOUT,
            headers={"Accept": "application/json"}
        )

    return _client


def set_client(client: Optional[httpx.AsyncClient]):
    """Use a preconfigured client (tests, custom transports)"""
    global _client
    _client = client


async def close_client():
    """Close the shared client"""
    global _client

    if _client:
        await _client.aclose()
        _client = None


def auth_headers(token: Optional[str]) -> dict:
    """Bearer header for authenticated calls"""
    if not token:
        return {}
    return {"Authorization": f"Bearer {token}"}


async def request(
    method: str,
    path: str,
    token: Optional[str] = None,
    json: Optional[dict] = None,
    error_message: str = "Request failed"
) -> dict:
    """
    Send one request and return the response envelope ({success, data, message}).

    Transport errors, HTTP error statuses and success=false all raise ApiError
    carrying the server message when there is one, else `error_message`.
    """
    client = await get_client()
    logger.info(f"{method} request to {path}")

    try:
        response = await client.request(method, path, json=json, headers=auth_headers(token))
    except httpx.HTTPError as e:
        logger.error(f"{method} {path} failed: {e}")
        raise ApiError(error_message) from e

    try:
        body = response.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {"success": response.is_success, "data": body}

    server_message = body.get("message") or body.get("error")
    if not isinstance(server_message, str):
        server_message = None

    if response.is_error or body.get("success") is False:
        logger.error(f"{method} {path} -> {response.status_code}: {server_message or error_message}")
        raise ApiError(
            server_message or error_message,
            status_code=response.status_code,
            server_message=server_message
        )

    return body
