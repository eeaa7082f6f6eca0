from __future__ import annotations

import argparse
import importlib

from dotenv import load_dotenv

from vacation_system.database.bootstrap import ensure_demo_users
from vacation_system.settings import get_settings_module


def main() -> None:
    parser = argparse.ArgumentParser(description="Create the demo admin and employee users.")
    parser.add_argument("--allowance", type=int, default=22, help="vacation days for newly created users")
    args = parser.parse_args()

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    ensure_demo_users(db_config, allowance=args.allowance)

    print(
        "OK: Seeded database -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )


if __name__ == "__main__":
    main()
