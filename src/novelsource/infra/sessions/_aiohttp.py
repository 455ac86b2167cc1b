from collections.abc import Mapping
from typing import Any

import aiohttp

from .base import BaseSession
from .response import BaseResponse


class AiohttpSession(BaseSession):
    """Session backend built on ``aiohttp.ClientSession``."""

    _session: aiohttp.ClientSession | None

    async def init(self, **kwargs: Any) -> None:
        if self._session and not self._session.closed:
            return

        proxy_auth: aiohttp.BasicAuth | None = None
        if self._proxy_user and self._proxy_pass:
            proxy_auth = aiohttp.BasicAuth(self._proxy_user, self._proxy_pass)

        connector = aiohttp.TCPConnector(
            ssl=self._verify_ssl,
            limit_per_host=self._max_connections,
        )
        self._session = aiohttp.ClientSession(
            connector=connector,
            timeout=aiohttp.ClientTimeout(total=self._timeout),
            headers=self._headers,
            trust_env=self._trust_env,
            proxy=self._proxy,
            proxy_auth=proxy_auth,
        )

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def get(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        encoding: str = "utf-8",
    ) -> BaseResponse:
        async with self.session.get(url, headers=headers) as r:
            content = await r.read()
            return BaseResponse(
                content=content,
                headers=list(r.headers.items()),
                status=r.status,
                encoding=r.charset or encoding,
                url=str(r.url),
            )

    @property
    def session(self) -> aiohttp.ClientSession:
        if self._session is None:
            raise RuntimeError("Session is not initialized or has been shut down.")
        return self._session
