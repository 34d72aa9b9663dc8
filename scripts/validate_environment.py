#!/usr/bin/env python3
"""Validate local venue pricing environment readiness."""

from __future__ import annotations

import importlib
import shutil
import sys
import tempfile
from dataclasses import replace
from importlib.metadata import version
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from venue_pricing.domain.models import Booking
from venue_pricing.repository.data_repository import DataRepository
from venue_pricing.services.catalog_service import CatalogService
from venue_pricing.services.pricing_service import PricingService
from venue_pricing.utils.config import get_settings

SEPARATOR_LINE = "=" * 44


def _print_result(name: str, success: bool, detail: str = "") -> tuple[bool, str]:
    if success:
        return True, f"[PASS] {name}{detail}"
    return False, f"[FAIL] {name}: {detail}"


def main() -> int:
    results: list[str] = []
    all_passed = True
    temp_dir = tempfile.mkdtemp(prefix="venue-pricing-env-")

    # CHECK 1: Python version >= 3.11
    if sys.version_info >= (3, 11):
        ok, line = _print_result("Python " + sys.version.split()[0], True)
    else:
        ok, line = _print_result(
            "Python version >= 3.11",
            False,
            f"found {sys.version.split()[0]}",
        )
    results.append(line)
    all_passed = all_passed and ok

    # CHECK 2: Required packages importable
    package_specs = [
        ("fastapi", "fastapi"),
        ("uvicorn", "uvicorn"),
        ("pydantic", "pydantic"),
        ("httpx", "httpx"),
        ("pytest", "pytest"),
    ]
    import_errors: list[str] = []
    for module_name, dist_name in package_specs:
        try:
            importlib.import_module(module_name)
            _ = version(dist_name)
        except Exception as exc:  # pragma: no cover
            import_errors.append(f"{module_name} ({exc})")
    if import_errors:
        ok, line = _print_result(
            "Required packages",
            False,
            "missing/unimportable -> " + "; ".join(import_errors),
        )
    else:
        ok, line = _print_result("Required packages: all importable", True)
    results.append(line)
    all_passed = all_passed and ok

    try:
        validation_settings = replace(
            get_settings(),
            database_path=Path(temp_dir) / "venue_pricing_validation.db",
            catalog_retry_delay_seconds=0.0,
        )
        repository = DataRepository(validation_settings)

        # CHECK 3: Database initialization and catalog seed
        try:
            repository.initialize_database()
            repository.seed_default_catalog()
            ok, line = _print_result("Database initialization", True)
        except Exception as exc:
            ok, line = _print_result("Database initialization", False, str(exc))
        results.append(line)
        all_passed = all_passed and ok

        # CHECK 4: Catalog load
        catalog_service = CatalogService(repository=repository, settings=validation_settings)
        try:
            catalog = catalog_service.get_catalog()
            ok, line = _print_result(
                "Catalog load",
                True,
                f": {len(catalog.room_rules)} rooms, {len(catalog.resources)} resources",
            )
        except Exception as exc:
            ok, line = _print_result("Catalog load", False, str(exc))
        results.append(line)
        all_passed = all_passed and ok

        # CHECK 5: Sample pricing run
        try:
            service = PricingService(
                repository=repository,
                settings=validation_settings,
                catalog_service=catalog_service,
            )
            batch = service.price_all(
                {
                    "2026-03-06": [
                        Booking(
                            booking_id="validation",
                            room_slugs=("main-hall",),
                            start="2026-03-06T15:00:00",
                            end="2026-03-06T21:00:00",
                            booking_date="2026-03-06",
                            resources=("food",),
                        )
                    ]
                }
            )
            failed = [estimate.error for estimate in batch.cost_estimates if estimate.failed]
            if failed:
                raise RuntimeError("; ".join(str(error) for error in failed))
            ok, line = _print_result(
                "Sample pricing run",
                True,
                f": total={batch.grand_total:.2f} with_tax={batch.total_with_tax:.2f}",
            )
        except Exception as exc:
            ok, line = _print_result("Sample pricing run", False, str(exc))
        results.append(line)
        all_passed = all_passed and ok

    finally:
        shutil.rmtree(temp_dir, ignore_errors=True)

    print(SEPARATOR_LINE)
    print(" Venue Pricing Environment Validation")
    print(SEPARATOR_LINE)
    for line in results:
        print(f" {line}")
    print(SEPARATOR_LINE)
    if all_passed:
        print(" All checks passed. Environment is ready.")
        print(SEPARATOR_LINE)
        return 0
    print(" One or more checks failed.")
    print(SEPARATOR_LINE)
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
