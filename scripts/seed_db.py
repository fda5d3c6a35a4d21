from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for path in (REPO_ROOT, REPO_ROOT / "src" / "license_tracker"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from config import get_settings_module

from license_tracker.database.bootstrap import seed_fixtures
from license_tracker.main import configure_logging

logger = logging.getLogger("scripts.seed_db")


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    db_config = dict(settings.DB_CONFIG)

    seeded = seed_fixtures(db_config)
    logger.info(
        "Seeded %s -> %s@%s:%s/%s",
        ", ".join(seeded) or "nothing",
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )


if __name__ == "__main__":
    main()
