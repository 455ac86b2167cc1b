from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from novelsource.rules import RuleModel
from novelsource.schemas import (
    BookSource,
    CacheConfig,
    ClientConfig,
    FetcherConfig,
    SessionConfig,
)

logger = logging.getLogger(__name__)


class ConfigAdapter:
    """High-level accessor over a loaded settings mapping.

    Values are read from the ``general`` table and fall back to the
    dataclass defaults. Book sources are read from the ``sources`` array.

    Args:
        config (dict[str, Any]): Settings mapping, usually from
            :func:`novelsource.infra.config.load_config`.
    """

    def __init__(self, config: dict[str, Any]) -> None:
        self._config: dict[str, Any] = dict(config)

    def get_config(self) -> dict[str, Any]:
        """Return the full raw settings mapping."""
        return self._config

    def get_session_config(self) -> SessionConfig:
        """Build a SessionConfig from general settings.

        Returns:
            SessionConfig: Resolved session configuration.
        """
        cfg = self._gen_cfg()
        return SessionConfig(
            timeout=float(cfg.get("timeout", 10.0)),
            max_connections=int(cfg.get("max_connections", 10)),
            user_agent=cfg.get("user_agent"),
            headers=cfg.get("headers"),
            impersonate=cfg.get("impersonate", "chrome"),
            verify_ssl=bool(cfg.get("verify_ssl", True)),
            http2=bool(cfg.get("http2", True)),
            trust_env=bool(cfg.get("trust_env", False)),
            proxy=cfg.get("proxy"),
            proxy_user=cfg.get("proxy_user"),
            proxy_pass=cfg.get("proxy_pass"),
        )

    def get_fetcher_config(self) -> FetcherConfig:
        """Build a FetcherConfig from general settings."""
        cfg = self._gen_cfg()
        backend = cfg.get("backend")
        return FetcherConfig(
            backend=backend if isinstance(backend, str) else "aiohttp",
            request_interval=float(cfg.get("request_interval", 0.0)),
            session_cfg=self.get_session_config(),
        )

    def get_cache_config(self) -> CacheConfig:
        """Build a CacheConfig from the ``general.cache`` table."""
        cache_cfg = self._gen_cfg().get("cache") or {}
        return CacheConfig(
            enabled=bool(cache_cfg.get("enabled", True)),
            backend=str(cache_cfg.get("backend", "sqlite")),
            cache_dir=cache_cfg.get("cache_dir"),
            version=str(cache_cfg.get("version", "v1")),
        )

    def get_client_config(self) -> ClientConfig:
        """Build a ClientConfig from general settings.

        Returns:
            ClientConfig: Resolved client configuration.
        """
        cfg = self._gen_cfg()
        defaults = cfg.get("defaults") or {}
        return ClientConfig(
            max_concurrency=max(1, int(cfg.get("max_concurrency", 8))),
            default_title=str(defaults.get("title", "Unknown Title")),
            default_author=str(defaults.get("author", "Unknown Author")),
            fetcher_cfg=self.get_fetcher_config(),
            cache_cfg=self.get_cache_config(),
        )

    def get_sources(self, model: RuleModel | None = None) -> list[BookSource]:
        """Hydrate every entry of the ``sources`` array.

        Entries that are not tables are skipped with a warning.

        Args:
            model: Rule model used for hydration. A fresh one is created when
                omitted.

        Returns:
            The configured book sources, in file order.
        """
        model = model or RuleModel()
        raw_sources = self._config.get("sources") or []
        if not isinstance(raw_sources, list):
            logger.warning("'sources' must be an array, got %s", type(raw_sources))
            return []

        sources: list[BookSource] = []
        for idx, entry in enumerate(raw_sources):
            if not isinstance(entry, Mapping):
                logger.warning("Skipping sources[%d]: not a table", idx)
                continue
            sources.append(model.hydrate_source(entry))
        return sources

    def _gen_cfg(self) -> dict[str, Any]:
        """Return the ``general`` table, or an empty dict."""
        general = self._config.get("general")
        return general if isinstance(general, dict) else {}
