#!/usr/bin/env python3
"""
Create the sales tables on the database named by DATABASE_URL.

Existing tables are left untouched, so the script is safe to rerun.
"""
import os
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sales_api.dal.schema import metadata  # noqa: E402
from sales_api.dal.sql_gateway import create_database_engine  # noqa: E402


def main():
    """Main schema creation function"""
    database_url = os.environ.get("DATABASE_URL")
    if not database_url:
        print("DATABASE_URL is not set", file=sys.stderr)
        sys.exit(1)

    engine = create_database_engine(database_url)
    print(f"Creating tables: {sorted(metadata.tables)}")
    metadata.create_all(engine)
    engine.dispose()
    print("Schema ready!")


if __name__ == "__main__":
    main()
