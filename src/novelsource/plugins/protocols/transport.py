"""
Protocol definition for the HTTP transport consumed by the fetcher.

Any object with a compatible ``get`` coroutine can be injected, which is
how tests replace the network. The shipped session backends satisfy it.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from novelsource.infra.sessions import BaseResponse


class TransportProtocol(Protocol):
    """Asynchronous GET capability."""

    async def get(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        encoding: str = "utf-8",
    ) -> BaseResponse:
        ...
