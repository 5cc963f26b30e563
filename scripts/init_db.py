from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for path in (REPO_ROOT, REPO_ROOT / "src"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from dotenv import load_dotenv

from config import get_settings_module

from church_attendance.database.bootstrap import apply_schema, list_tables
from church_attendance.database.connection import DBConfig


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db = DBConfig.from_mapping(dict(settings.DB_CONFIG), timeout=int(getattr(settings, "FETCH_TIMEOUT_SECONDS", 10)))

    schema_path = REPO_ROOT / "database" / "schema.sql"
    apply_schema(db, schema_path=schema_path)
    tables = list_tables(db)
    print(f"OK: Applied schema.sql -> {db.user}@{db.host}:{db.port}/{db.database} (tables={len(tables)})")


if __name__ == "__main__":
    main()
