"""
Backend-agnostic response objects returned by the session layer.

Book sources serve pages in a mix of UTF-8 and legacy Chinese encodings,
so decoding walks a short list of fallbacks before giving up.
"""

from __future__ import annotations

import json
import re
from collections import defaultdict
from collections.abc import Iterator, Mapping, MutableMapping, Sequence
from typing import Any

_FALLBACK_ENCODINGS = ("utf-8", "gb18030", "gbk", "big5")
_CHARSET_RE = re.compile(r"charset\s*=\s*[\"']?([\w.:-]+)", re.IGNORECASE)


def content_type_charset(content_type: str | None) -> str | None:
    """Return the charset declared in a Content-Type value, if any."""
    if not content_type:
        return None
    m = _CHARSET_RE.search(content_type)
    return m.group(1) if m else None


class Headers(MutableMapping[str, str]):
    """Case-insensitive, multi-value header container.

    Keys are stored lowercased. Item assignment replaces every value of a
    field while :meth:`add` appends.
    """

    __slots__ = ("_store",)

    def __init__(
        self,
        headers: Mapping[str, str] | Sequence[tuple[str, str]] | None = None,
    ) -> None:
        self._store: dict[str, list[str]] = defaultdict(list)
        if not headers:
            return

        pairs = headers.items() if isinstance(headers, Mapping) else headers
        for k, v in pairs:
            self.add(k, v)

    def add(self, key: str, value: str | None) -> None:
        self._store[key.lower()].append(value or "")

    def get_all(self, key: str) -> list[str]:
        return list(self._store.get(key.lower(), []))

    def __getitem__(self, key: str) -> str:
        vals = self._store.get(key.lower())
        if not vals:
            raise KeyError(key)
        return vals[0]

    def __setitem__(self, key: str, value: str) -> None:
        self._store[key.lower()] = [value]

    def __delitem__(self, key: str) -> None:
        del self._store[key.lower()]

    def __iter__(self) -> Iterator[str]:
        return iter(self._store)

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._store

    def __repr__(self) -> str:
        items = ", ".join(f"{k}={len(v)}" for k, v in self._store.items())
        return f"<Headers ({items})>"


class BaseResponse:
    """Response wrapper shared by every session backend.

    Args:
        content: Raw response body.
        headers: Response headers.
        status: HTTP status code.
        encoding: Preferred text encoding (server charset or source hint).
        url: Final URL of the response, after redirects.
    """

    __slots__ = ("content", "headers", "status", "encoding", "url")

    def __init__(
        self,
        *,
        content: bytes,
        headers: Mapping[str, str] | Sequence[tuple[str, str]] | None = None,
        status: int = 200,
        encoding: str = "utf-8",
        url: str = "",
    ) -> None:
        self.content = content
        self.headers = Headers(headers)
        self.status = status
        self.encoding = encoding
        self.url = url

    @property
    def text(self) -> str:
        """Decode the body.

        The preferred encoding is tried first, then the common fallbacks.
        As a last resort the preferred encoding is used with undecodable
        bytes dropped.
        """
        tried: set[str] = set()
        for enc in (self.encoding, *_FALLBACK_ENCODINGS):
            key = enc.lower()
            if key in tried:
                continue
            tried.add(key)
            try:
                return self.content.decode(enc)
            except (UnicodeDecodeError, LookupError):
                continue
        try:
            return self.content.decode(self.encoding, errors="ignore")
        except LookupError:
            return self.content.decode("utf-8", errors="ignore")

    def json(self) -> Any:
        """Parse the body as JSON.

        Raises:
            json.JSONDecodeError: If the body is not valid JSON.
        """
        return json.loads(self.text)

    @property
    def ok(self) -> bool:
        """True when the status code is below 400."""
        return self.status < 400

    def __repr__(self) -> str:
        return f"<BaseResponse status={self.status} len={len(self.content)}>"
