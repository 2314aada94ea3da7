# backend/app/cli/__main__.py
from __future__ import annotations

import argparse

from app.cli.seed_demo import seed_demo
from app.config import Settings
from app.db import Database


def _init_db(settings: Settings, _args: argparse.Namespace) -> None:
    database = Database.from_settings(settings)
    try:
        database.create_all()
    finally:
        database.dispose()
    print({"ok": True, "database": settings.database_url.split("://", 1)[0]})


def _seed_demo(settings: Settings, args: argparse.Namespace) -> None:
    out = seed_demo(
        settings=settings,
        user_email=args.user_email,
        user_name=args.user_name,
        password=args.password,
        create_sample_property=(not args.no_sample_property),
    )
    print(
        {
            "ok": True,
            "user_email": out.user_email,
            "user_id": out.user_id,
            "sample_property_id": out.property_id,
        }
    )


def main(argv: list[str] | None = None) -> None:
    p = argparse.ArgumentParser(prog="python -m app.cli")
    sub = p.add_subparsers(dest="command", required=True)

    init = sub.add_parser("init-db", help="create all tables (dev/test; use alembic in prod)")
    init.set_defaults(func=_init_db)

    seed = sub.add_parser("seed-demo", help="create a demo seller with one active listing")
    seed.add_argument("--user-email", default="demo-seller@example.com")
    seed.add_argument("--user-name", default="Demo Seller")
    seed.add_argument("--password", default="demo-pass-123")
    seed.add_argument("--no-sample-property", action="store_true")
    seed.set_defaults(func=_seed_demo)

    args = p.parse_args(argv)
    args.func(Settings(), args)


if __name__ == "__main__":
    main()
