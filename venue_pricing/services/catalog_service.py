"""Catalog provider: loads a RuleCatalog snapshot from the store with retries."""

from __future__ import annotations

import sqlite3
import time
from threading import RLock
from typing import Callable, Optional

from venue_pricing.domain.catalog import build_catalog
from venue_pricing.domain.errors import CatalogLoadError
from venue_pricing.domain.models import RuleCatalog
from venue_pricing.repository.data_repository import DataRepository
from venue_pricing.utils.config import Settings, get_settings
from venue_pricing.utils.logger import get_logger


logger = get_logger(__name__)


class CatalogService:
    """Owns catalog retrieval, retry/backoff and snapshot caching.

    The pricing core only ever receives the immutable snapshot returned by
    `get_catalog`; it never reaches back into the store.
    """

    def __init__(
        self,
        repository: Optional[DataRepository] = None,
        settings: Optional[Settings] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._settings = settings or get_settings()
        if self._settings.catalog_max_retries < 1:
            raise ValueError("catalog_max_retries must be >= 1")
        self._repository = repository or DataRepository(self._settings)
        self._sleep = sleep
        self._lock = RLock()
        self._snapshot: RuleCatalog | None = None

    def load_catalog(self) -> RuleCatalog:
        max_retries = self._settings.catalog_max_retries
        last_error: Exception | None = None
        for attempt in range(1, max_retries + 1):
            try:
                room_documents = self._repository.list_room_rules()
                resource_documents = self._repository.list_resources()
            except (sqlite3.Error, RuntimeError) as exc:
                last_error = exc
                logger.warning(
                    "Catalog fetch failed | attempt=%s | max_retries=%s | error=%s",
                    attempt,
                    max_retries,
                    exc,
                )
                if attempt < max_retries:
                    self._sleep(self._settings.catalog_retry_delay_seconds)
                continue

            catalog = build_catalog(room_documents, resource_documents)
            logger.info(
                "Catalog loaded | rooms=%s | resources=%s",
                len(catalog.room_rules),
                len(catalog.resources),
            )
            return catalog

        raise CatalogLoadError(
            f"Failed to fetch pricing data after {max_retries} attempts: {last_error}"
        )

    def get_catalog(self, refresh: bool = False) -> RuleCatalog:
        with self._lock:
            if self._snapshot is None or refresh:
                self._snapshot = self.load_catalog()
            return self._snapshot

    def invalidate(self) -> None:
        with self._lock:
            self._snapshot = None
