import pytest

from novelsource.plugins.client import BookSourceClient
from novelsource.schemas import CacheConfig, ClientConfig, SessionConfig

from ...plugins.utils import make_source
from .utils import SUPPORTED_BACKENDS, safe_create


def listing_source(base_url):
    return make_source(
        base_url=base_url,
        search={
            "searchUrl": "/s?q={{key}}",
            "itemSelector": "li.book",
            "titleSelector": "a",
            "detailSelector": "a",
        },
    )


@pytest.mark.parametrize("backend", sorted(SUPPORTED_BACKENDS))
@pytest.mark.asyncio
async def test_get_requires_init(backend):
    s = safe_create(backend, SessionConfig())

    with pytest.raises(RuntimeError):
        await s.get("http://127.0.0.1:9/")


@pytest.mark.parametrize("backend", sorted(SUPPORTED_BACKENDS))
@pytest.mark.asyncio
async def test_context_exit_closes_session(backend, test_server):
    url = str(test_server.make_url("/ok"))

    async with safe_create(backend, SessionConfig()) as s:
        assert (await s.get(url)).ok

    with pytest.raises(RuntimeError):
        await s.get(url)


@pytest.mark.parametrize("backend", sorted(SUPPORTED_BACKENDS))
@pytest.mark.asyncio
async def test_session_can_be_reopened(backend, test_server):
    url = str(test_server.make_url("/ok"))
    s = safe_create(backend, SessionConfig())

    await s.init()
    await s.init()
    await s.close()
    await s.close()
    await s.init()
    try:
        assert (await s.get(url)).text == "hello"
    finally:
        await s.close()


@pytest.mark.asyncio
async def test_client_reopens_owned_session_after_close(test_server):
    config = ClientConfig(cache_cfg=CacheConfig(backend="memory"))
    client = BookSourceClient([listing_source(str(test_server.make_url("/")))], config)

    first = await client.search_all("x")
    await client.close()
    second = await client.search_all("x")
    await client.close()

    assert [r["title"] for r in first] == ["代理书目"]
    assert [r["title"] for r in second] == ["代理书目"]


@pytest.mark.parametrize("backend", sorted(SUPPORTED_BACKENDS))
@pytest.mark.asyncio
async def test_client_leaves_injected_session_open(backend, test_server):
    config = ClientConfig(cache_cfg=CacheConfig(backend="memory"))
    source = listing_source(str(test_server.make_url("/")))

    async with safe_create(backend, SessionConfig()) as s:
        async with BookSourceClient([source], config, session=s) as client:
            assert len(await client.search_all("x")) == 1

        resp = await s.get(str(test_server.make_url("/ok")))
        assert resp.text == "hello"
