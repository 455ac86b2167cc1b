"""
Defines structured configuration models using dataclasses.
"""

from dataclasses import dataclass, field


@dataclass
class SessionConfig:
    """Configuration for HTTP session behavior.

    Attributes:
        timeout: Request timeout in seconds.
        max_connections: Maximum number of concurrent connections.
        user_agent: Custom User-Agent string.
        headers: Additional headers to attach to requests.
        impersonate: Browser impersonation mode. (`curl_cffi`)
        verify_ssl: Whether to verify SSL certificates.
        http2: Whether HTTP/2 should be used. (`httpx`)
        trust_env: Whether environment variables are used for proxies.
        proxy: Proxy server URL.
        proxy_user: Proxy authentication username.
        proxy_pass: Proxy authentication password.
    """

    timeout: float = 10.0
    max_connections: int = 10
    user_agent: str | None = None
    headers: dict[str, str] | None = None
    impersonate: str | None = "chrome"
    verify_ssl: bool = True
    http2: bool = True
    trust_env: bool = False
    proxy: str | None = None
    proxy_user: str | None = None
    proxy_pass: str | None = None


@dataclass
class FetcherConfig:
    """Configuration for fetching pages from book sources.

    Attributes:
        backend: HTTP backend name (aiohttp, httpx, curl_cffi).
        request_interval: Delay applied after each request of one source.
        session_cfg: HTTP session configuration.
    """

    backend: str = "aiohttp"
    request_interval: float = 0.0
    session_cfg: SessionConfig = field(default_factory=SessionConfig)


@dataclass
class CacheConfig:
    """Configuration for the chapter content cache.

    Attributes:
        enabled: Whether chapter reads go through the cache.
        backend: Key-value store backing the cache ("sqlite" or "memory").
        cache_dir: Directory holding the SQLite store. Defaults to the
            per-user cache directory.
        version: Tag mixed into every cache key. Bump it whenever the
            extracted text format changes.
    """

    enabled: bool = True
    backend: str = "sqlite"
    cache_dir: str | None = None
    version: str = "v1"


@dataclass
class ClientConfig:
    """Top-level configuration for the book source client.

    Attributes:
        max_concurrency: Upper bound on simultaneous fetches across sources.
        default_title: Title used when a search row has none.
        default_author: Author used when a search row has none.
        fetcher_cfg: Configuration for page fetching.
        cache_cfg: Configuration for the chapter cache.
    """

    max_concurrency: int = 8
    default_title: str = "Unknown Title"
    default_author: str = "Unknown Author"
    fetcher_cfg: FetcherConfig = field(default_factory=FetcherConfig)
    cache_cfg: CacheConfig = field(default_factory=CacheConfig)
