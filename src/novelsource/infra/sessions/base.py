from __future__ import annotations

import abc
import types
from collections.abc import Mapping
from typing import Any, Self

from novelsource.infra.http_defaults import DEFAULT_USER_HEADERS
from novelsource.schemas import SessionConfig

from .response import BaseResponse


class BaseSession(abc.ABC):
    """Minimal asynchronous HTTP session used to download source pages.

    Only ``GET`` is needed: every rule group of a book source is driven by a
    URL. Per-request headers are merged over the session headers.
    """

    def __init__(self, cfg: SessionConfig | None = None, **kwargs: Any) -> None:
        """Initializes the session using the provided configuration.

        Args:
            cfg: Optional session configuration.
            **kwargs: Reserved for backend-specific initialization.
        """
        cfg = cfg or SessionConfig()

        self._timeout = cfg.timeout
        self._max_connections = cfg.max_connections
        self._verify_ssl = cfg.verify_ssl
        self._impersonate = cfg.impersonate
        self._http2 = cfg.http2
        self._proxy = cfg.proxy
        self._proxy_user = cfg.proxy_user
        self._proxy_pass = cfg.proxy_pass
        self._trust_env = cfg.trust_env
        self._session: Any = None

        self._headers = (
            dict(cfg.headers)
            if cfg.headers is not None
            else DEFAULT_USER_HEADERS.copy()
        )
        if cfg.user_agent:
            self._headers["User-Agent"] = cfg.user_agent

    @abc.abstractmethod
    async def init(self, **kwargs: Any) -> None:
        """Create backend resources. Calling it twice is a no-op."""
        ...

    @abc.abstractmethod
    async def close(self) -> None:
        """Release backend resources."""
        ...

    @abc.abstractmethod
    async def get(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        encoding: str = "utf-8",
    ) -> BaseResponse:
        """Performs an HTTP GET request.

        Args:
            url: Target URL.
            headers: Extra headers for this request only.
            encoding: Encoding used when the server declares no charset.

        Returns:
            BaseResponse: The wrapped response.

        Raises:
            RuntimeError: If the session has not been initialized.
        """
        ...

    @property
    def headers(self) -> dict[str, str]:
        """Return a copy of the session headers."""
        return self._headers.copy()

    async def __aenter__(self) -> Self:
        await self.init()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        tb: types.TracebackType | None,
    ) -> None:
        await self.close()
