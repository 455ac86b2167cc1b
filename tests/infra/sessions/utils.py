from __future__ import annotations

from typing import Any

import pytest

from novelsource.infra.sessions import create_session
from novelsource.infra.sessions.base import BaseSession
from novelsource.schemas import SessionConfig

SUPPORTED_BACKENDS: set[str] = {"aiohttp", "httpx", "curl_cffi"}

BOOK_LIST_PAGE = '<ul><li class="book"><a href="/book/9/">代理书目</a></li></ul>'


def safe_create(backend: str, cfg: SessionConfig, **kw: Any) -> BaseSession:
    """
    Create backend instance, skipping test if backend dependency is missing.
    """
    try:
        return create_session(backend, cfg, **kw)
    except ImportError as e:
        pytest.skip(f"backend {backend!r} not installed: {e}")
