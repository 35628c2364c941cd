from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.shift_attendance.shift_attendance.database.bootstrap import (
    ensure_database_exists,
    list_tables,
    run_startup_migrations,
)
from src.shift_attendance.shift_attendance.database.connection import DBConfig, DatabaseConnection


def main() -> None:
    load_dotenv(override=False)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    settings = importlib.import_module(get_settings_module())
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(settings.DB_CONFIG))

    ensure_database_exists(conn)
    run_startup_migrations(conn, schema_path=REPO_ROOT / "database" / "schema.sql")
    cfg = conn.config
    logging.getLogger("init_db").info(
        "Schema applied to %s@%s:%s/%s (tables=%d)", cfg.user, cfg.host, cfg.port, cfg.database, len(list_tables(conn))
    )


if __name__ == "__main__":
    main()
