from collections.abc import Mapping
from typing import Any

import httpx

from .base import BaseSession
from .response import BaseResponse


class HttpxSession(BaseSession):
    """Session backend built on ``httpx.AsyncClient`` (HTTP/1.1 and HTTP/2)."""

    _session: httpx.AsyncClient | None

    async def init(self, **kwargs: Any) -> None:
        if self._session and not self._session.is_closed:
            return

        limits = httpx.Limits(
            max_keepalive_connections=self._max_connections,
            max_connections=self._max_connections,
        )
        self._session = httpx.AsyncClient(
            http2=self._http2,
            timeout=self._timeout,
            verify=self._verify_ssl,
            headers=self._headers,
            limits=limits,
            proxy=self._build_proxy_config(
                self._proxy, self._proxy_user, self._proxy_pass
            ),
            trust_env=self._trust_env,
            follow_redirects=True,
        )

    async def close(self) -> None:
        if self._session is None:
            return
        if not self._session.is_closed:
            await self._session.aclose()
        self._session = None

    async def get(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        encoding: str = "utf-8",
    ) -> BaseResponse:
        r = await self.session.get(url, headers=dict(headers) if headers else None)
        return BaseResponse(
            content=r.content,
            headers=list(r.headers.items()),
            status=r.status_code,
            encoding=r.charset_encoding or encoding,
            url=str(r.url),
        )

    @property
    def session(self) -> httpx.AsyncClient:
        if self._session is None:
            raise RuntimeError("Session is not initialized or has been shut down.")
        return self._session

    @staticmethod
    def _build_proxy_config(
        proxy: str | None = None,
        proxy_user: str | None = None,
        proxy_pass: str | None = None,
    ) -> str | httpx.Proxy | None:
        if not proxy:
            return None
        if "@" in proxy or not (proxy_user and proxy_pass):
            return proxy
        return httpx.Proxy(proxy, auth=(proxy_user, proxy_pass))
