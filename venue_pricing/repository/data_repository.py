"""Repository layer responsible for all database access."""

from __future__ import annotations

import json
import sqlite3
from pathlib import Path
from typing import Any, Optional
from uuid import uuid4

from venue_pricing.repository.default_catalog import DEFAULT_RESOURCES, DEFAULT_ROOM_RULES
from venue_pricing.utils.config import Settings, get_settings
from venue_pricing.utils.logger import get_logger


logger = get_logger(__name__)


class DataRepository:
    """Encapsulates SQLite access so business logic stays storage-agnostic."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or get_settings()
        self._db_path = Path(self._settings.database_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def database_path(self) -> Path:
        return self._db_path

    def _connect(self) -> sqlite3.Connection:
        connection = sqlite3.connect(self._db_path)
        connection.row_factory = sqlite3.Row
        return connection

    def initialize_database(self) -> None:
        """Create all persistence artifacts before API startup."""
        try:
            with self._connect() as conn:
                cursor = conn.cursor()

                cursor.execute(
                    """
                    CREATE TABLE IF NOT EXISTS PricingRules (
                        room_slug TEXT PRIMARY KEY,
                        pricing TEXT NOT NULL,
                        updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
                    );
                    """
                )

                cursor.execute(
                    """
                    CREATE TABLE IF NOT EXISTS Resources (
                        id TEXT PRIMARY KEY,
                        payload TEXT NOT NULL,
                        updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
                    );
                    """
                )

                cursor.execute(
                    """
                    CREATE TABLE IF NOT EXISTS CostEstimates (
                        id TEXT PRIMARY KEY,
                        rental_request_id TEXT NOT NULL,
                        grand_total REAL NOT NULL,
                        tax REAL NOT NULL,
                        total_with_tax REAL NOT NULL,
                        payload TEXT NOT NULL,
                        created_at DATETIME DEFAULT CURRENT_TIMESTAMP
                    );
                    """
                )

                cursor.execute(
                    """
                    CREATE INDEX IF NOT EXISTS idx_cost_estimates_rental_request
                    ON CostEstimates(rental_request_id);
                    """
                )
                conn.commit()
            logger.info("Database initialized at %s", self._db_path)
        except sqlite3.Error as exc:
            raise RuntimeError(f"Database initialization failed: {exc}") from exc

    def seed_default_catalog(self) -> None:
        """Seed the venue's rooms and resources only when the catalog is empty."""
        try:
            with self._connect() as conn:
                cursor = conn.cursor()
                cursor.execute("SELECT COUNT(*) AS count FROM PricingRules;")
                if int(cursor.fetchone()["count"]) > 0:
                    logger.info("Catalog already present; skipping seed")
                    return

                cursor.executemany(
                    "INSERT INTO PricingRules (room_slug, pricing) VALUES (?, ?);",
                    [
                        (room_slug, json.dumps(pricing))
                        for room_slug, pricing in DEFAULT_ROOM_RULES.items()
                    ],
                )
                cursor.executemany(
                    "INSERT OR REPLACE INTO Resources (id, payload) VALUES (?, ?);",
                    [(resource["id"], json.dumps(resource)) for resource in DEFAULT_RESOURCES],
                )
                conn.commit()
            logger.info(
                "Catalog seed completed | rooms=%s | resources=%s",
                len(DEFAULT_ROOM_RULES),
                len(DEFAULT_RESOURCES),
            )
        except sqlite3.Error as exc:
            raise RuntimeError(f"Catalog seeding failed: {exc}") from exc

    def upsert_room_rules(self, room_slug: str, pricing: dict[str, Any]) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO PricingRules (room_slug, pricing) VALUES (?, ?)
                ON CONFLICT(room_slug) DO UPDATE SET
                    pricing = excluded.pricing,
                    updated_at = CURRENT_TIMESTAMP;
                """,
                (room_slug, json.dumps(pricing)),
            )
            conn.commit()

    def upsert_resource(self, resource: dict[str, Any]) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO Resources (id, payload) VALUES (?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    payload = excluded.payload,
                    updated_at = CURRENT_TIMESTAMP;
                """,
                (resource["id"], json.dumps(resource)),
            )
            conn.commit()

    def list_room_rules(self) -> dict[str, Any]:
        """Return the raw pricing document of every room, keyed by slug."""
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT room_slug, pricing FROM PricingRules ORDER BY room_slug ASC;")
            return {str(row["room_slug"]): json.loads(row["pricing"]) for row in cursor.fetchall()}

    def list_resources(self) -> list[dict[str, Any]]:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT payload FROM Resources ORDER BY id ASC;")
            return [json.loads(row["payload"]) for row in cursor.fetchall()]

    def save_cost_estimate(
        self,
        *,
        rental_request_id: str,
        document: dict[str, Any],
        grand_total: float,
        tax: float,
        total_with_tax: float,
    ) -> str:
        estimate_id = str(uuid4())
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO CostEstimates (
                    id, rental_request_id, grand_total, tax, total_with_tax, payload
                ) VALUES (?, ?, ?, ?, ?, ?);
                """,
                (
                    estimate_id,
                    rental_request_id,
                    grand_total,
                    tax,
                    total_with_tax,
                    json.dumps(document),
                ),
            )
            conn.commit()
        return estimate_id

    def get_cost_estimate(self, estimate_id: str) -> Optional[dict[str, Any]]:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT id, rental_request_id, payload, created_at
                FROM CostEstimates
                WHERE id = ?;
                """,
                (estimate_id,),
            )
            row = cursor.fetchone()
            if row is None:
                return None
            return {
                "estimateId": str(row["id"]),
                "rentalRequestId": str(row["rental_request_id"]),
                "createdAt": str(row["created_at"]),
                **json.loads(row["payload"]),
            }

    def count_cost_estimates(self) -> int:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT COUNT(*) AS count FROM CostEstimates;")
            return int(cursor.fetchone()["count"])
