"""
HTTP session backends used to download book source pages.
"""

__all__ = ["create_session", "BaseResponse", "BaseSession"]

from typing import Any

from novelsource.schemas import SessionConfig

from .base import BaseSession
from .response import BaseResponse


def create_session(
    backend: str,
    cfg: SessionConfig | None = None,
    **kwargs: Any,
) -> BaseSession:
    """Create a session for the named backend.

    Supported backends:
        * "aiohttp"
        * "httpx"
        * "curl_cffi"

    Args:
        backend: Backend name.
        cfg: Optional session configuration.
        **kwargs: Forwarded to the backend constructor.

    Returns:
        BaseSession: A session that still needs :meth:`BaseSession.init`.

    Raises:
        ValueError: If the backend name is not supported.
    """
    match backend:
        case "aiohttp":
            from ._aiohttp import AiohttpSession

            return AiohttpSession(cfg, **kwargs)
        case "httpx":
            from ._httpx import HttpxSession

            return HttpxSession(cfg, **kwargs)
        case "curl_cffi":
            from ._curl_cffi import CurlCffiSession

            return CurlCffiSession(cfg, **kwargs)
        case _:
            raise ValueError(f"Unsupported backend: {backend!r}")
