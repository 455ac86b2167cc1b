from __future__ import annotations

import base64

import aiohttp
import aiohttp.web
import pytest_asyncio

from .utils import BOOK_LIST_PAGE


@pytest_asyncio.fixture
async def test_server(aiohttp_server):
    async def handler_ok(request):
        return aiohttp.web.Response(text="hello", status=200)

    async def handler_redirect(request):
        raise aiohttp.web.HTTPFound("/ok")

    async def handler_echo_headers(request):
        return aiohttp.web.json_response({"headers": dict(request.headers)})

    async def handler_gbk(request):
        return aiohttp.web.Response(
            body="斗破苍穹".encode("gbk"),
            headers={"Content-Type": "text/html; charset=gbk"},
        )

    async def handler_search(request):
        return aiohttp.web.Response(text=BOOK_LIST_PAGE, content_type="text/html")

    async def handler_no_charset(request):
        return aiohttp.web.Response(
            body=b"<p>plain</p>",
            headers={"Content-Type": "text/html"},
        )

    app = aiohttp.web.Application()
    app.router.add_get("/ok", handler_ok)
    app.router.add_get("/redirect", handler_redirect)
    app.router.add_get("/echo-headers", handler_echo_headers)
    app.router.add_get("/gbk", handler_gbk)
    app.router.add_get("/no-charset", handler_no_charset)
    app.router.add_get("/s", handler_search)

    server = await aiohttp_server(app)
    return server


@pytest_asyncio.fixture
async def proxy_noauth_server(aiohttp_server):
    """Proxy answering every request with a one-book search page."""
    seen = {"count": 0, "paths": [], "headers": []}

    async def handler(request):
        seen["count"] += 1
        seen["paths"].append(request.raw_path)
        seen["headers"].append(dict(request.headers))
        return aiohttp.web.Response(text=BOOK_LIST_PAGE, content_type="text/html")

    app = aiohttp.web.Application()
    app.router.add_route("*", "/{tail:.*}", handler)
    server = await aiohttp_server(app)
    server.seen = seen
    return server


@pytest_asyncio.fixture
async def proxy_auth_server(aiohttp_server):
    """Proxy enforcing Basic authentication."""
    required_user = "user1"
    required_pass = "pass1"
    token = base64.b64encode(f"{required_user}:{required_pass}".encode()).decode()
    required_header = f"Basic {token}"

    seen = {
        "count": 0,
        "auth_headers": [],
        "authed_count": 0,
        "challenged_count": 0,
    }

    async def handler(request):
        seen["count"] += 1
        auth = request.headers.get("Proxy-Authorization")
        if auth:
            seen["auth_headers"].append(auth)

        if auth != required_header:
            seen["challenged_count"] += 1
            return aiohttp.web.Response(
                text="proxy auth required",
                status=407,
                headers={"Proxy-Authenticate": "Basic"},
            )

        seen["authed_count"] += 1
        return aiohttp.web.Response(text=BOOK_LIST_PAGE, content_type="text/html")

    app = aiohttp.web.Application()
    app.router.add_route("*", "/{tail:.*}", handler)

    server = await aiohttp_server(app)
    server.required_user = required_user
    server.required_pass = required_pass
    server.required_header = required_header
    server.seen = seen
    return server
