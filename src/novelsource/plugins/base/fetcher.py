"""
Page fetching for rule-driven book sources.

:class:`SourceFetcher` wraps an injected transport with the per-source
request policy: header rules, the preferred charset, a shared concurrency
bound and an optional pause between requests.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
from collections.abc import Iterator

from novelsource.plugins.protocols import TransportProtocol
from novelsource.schemas import BookSource, RuleGroupKey

logger = logging.getLogger(__name__)


class SourceFetcher:
    """Downloads pages on behalf of book sources.

    Args:
        transport: Object performing the HTTP GET requests.
        semaphore: Optional semaphore shared by every fetch of a client;
            bounds the number of requests in flight.
        request_interval: Delay in seconds applied after each request.
    """

    def __init__(
        self,
        transport: TransportProtocol,
        *,
        semaphore: asyncio.Semaphore | None = None,
        request_interval: float = 0.0,
    ) -> None:
        self._transport = transport
        self._semaphore = semaphore
        self._request_interval = request_interval

    @property
    def transport(self) -> TransportProtocol:
        return self._transport

    async def fetch_text(
        self,
        url: str,
        source: BookSource,
        group: RuleGroupKey,
    ) -> str:
        """Fetches and decodes the page at ``url`` for a rule group.

        Args:
            url: Target URL.
            source: Book source the page belongs to.
            group: Rule group whose ``headers`` rule applies.

        Returns:
            The decoded body.

        Raises:
            ConnectionError: If the request fails, times out, or returns a
                non-successful HTTP status.
        """
        headers = self.build_headers(source, group)
        encoding = source.rule_value(RuleGroupKey.BASIC, "charset") or "utf-8"

        async with self._slot():
            try:
                resp = await self._transport.get(
                    url, headers=headers or None, encoding=encoding
                )
            except ConnectionError:
                raise
            except Exception as e:
                raise ConnectionError(f"Request to {url} failed: {e}") from e
            await self._sleep()

        if not resp.ok:
            raise ConnectionError(f"Request to {url} failed with status {resp.status}")
        return resp.text

    @classmethod
    def build_headers(cls, source: BookSource, group: RuleGroupKey) -> dict[str, str]:
        """Merge the header sources of a request.

        Later entries override earlier ones:

        1. the ``headers`` rule of the basic group,
        2. :attr:`BookSource.headers`,
        3. the ``headers`` rule of ``group``.
        """
        headers: dict[str, str] = {}
        for label, raw in cls._header_blobs(source, group):
            headers.update(cls._parse_headers(raw, source, label))
        return headers

    @staticmethod
    def _header_blobs(
        source: BookSource, group: RuleGroupKey
    ) -> Iterator[tuple[str, str]]:
        yield "basic.headers", source.rule_value(RuleGroupKey.BASIC, "headers")
        yield "source.headers", (source.headers or "").strip()
        if group != RuleGroupKey.BASIC:
            yield f"{group}.headers", source.rule_value(group, "headers")

    @staticmethod
    def _parse_headers(raw: str, source: BookSource, label: str) -> dict[str, str]:
        if not raw:
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("Source %s: invalid JSON in %s: %s", source.name, label, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Source %s: %s must be a JSON object", source.name, label)
            return {}
        return {str(k): str(v) for k, v in data.items() if v is not None}

    def _slot(self) -> contextlib.AbstractAsyncContextManager[object]:
        if self._semaphore is None:
            return contextlib.nullcontext()
        return self._semaphore

    async def _sleep(self) -> None:
        if self._request_interval > 0:
            await asyncio.sleep(self._request_interval)
