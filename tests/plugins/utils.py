from __future__ import annotations

import asyncio
from collections.abc import Mapping

from novelsource.infra.persistence import MemoryKVStore
from novelsource.infra.sessions import BaseResponse
from novelsource.rules import RuleModel
from novelsource.schemas import BookSource, RuleGroupKey, SelectorDialect

_MODEL = RuleModel(namespace="test")

Page = str | tuple[int, str] | Exception


class FakeTransport:
    """In-memory transport serving canned pages by URL.

    Unknown URLs answer 404. Every call is recorded in ``calls``.
    """

    def __init__(self, pages: Mapping[str, Page] | None = None, delay: float = 0.0):
        self.pages: dict[str, Page] = dict(pages or {})
        self.delay = delay
        self.calls: list[tuple[str, dict[str, str], str]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def get(self, url, *, headers=None, encoding="utf-8"):
        self.calls.append((url, dict(headers or {}), encoding))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            page = self.pages.get(url)
        finally:
            self.in_flight -= 1

        if page is None:
            return BaseResponse(content=b"not found", status=404)
        if isinstance(page, Exception):
            raise page
        status, body = page if isinstance(page, tuple) else (200, page)
        return BaseResponse(content=body.encode("utf-8"), status=status)

    def urls(self) -> list[str]:
        return [c[0] for c in self.calls]


def make_source(
    rule_type: SelectorDialect | str = SelectorDialect.CSS,
    *,
    name: str = "测试书源",
    base_url: str = "https://s.test",
    enabled: bool = True,
    headers: str | None = None,
    **groups: Mapping[str, str],
) -> BookSource:
    """Build an enabled source whose rules are given per group.

    Example::

        make_source("xpath", search={"itemSelector": "//li"})
    """
    source = _MODEL.create_default()
    source.name = name
    source.base_url = base_url
    source.enabled = enabled
    source.rule_type = rule_type
    source.headers = headers
    for group_name, values in groups.items():
        group = RuleGroupKey(group_name)
        for key, value in values.items():
            rule = source.rule(group, key) or _MODEL.add_rule(source, group, key=key)
            rule.value = value
    return source


class RecordingStore(MemoryKVStore):
    """Memory store remembering every key written to it."""

    def __init__(self) -> None:
        super().__init__()
        self.written: list[str] = []

    async def set(self, key: str, value: str) -> None:
        self.written.append(key)
        await super().set(key, value)
