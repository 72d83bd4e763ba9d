from __future__ import annotations

import argparse

from .config import settings
from .db import SessionLocal, engine, init_db
from .logging_setup import configure_logging
from .seed import seed


def cmd_init_db(_args) -> None:
    init_db(engine)
    print("Database initialised")


def cmd_seed(args) -> None:
    init_db(engine)
    with SessionLocal() as db:
        ids = seed(db, clear=args.clear)
    for key, pid in ids.items():
        print(f"{key}: {pid}")


def cmd_serve(args) -> None:
    import uvicorn

    uvicorn.run("people_network.main:app", host=args.host, port=args.port, reload=args.reload)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="people-network")
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level (default from LOG_LEVEL)")
    sub = parser.add_subparsers(dest="command", required=True)

    p_init = sub.add_parser("init-db", help="Create database tables")
    p_init.set_defaults(func=cmd_init_db)

    p_seed = sub.add_parser("seed", help="Insert the example dataset")
    p_seed.add_argument("--clear", action="store_true", help="Delete all people and relationships first")
    p_seed.set_defaults(func=cmd_seed)

    p_serve = sub.add_parser("serve", help="Run the HTTP API")
    p_serve.add_argument("--host", default=settings.host)
    p_serve.add_argument("--port", type=int, default=settings.port)
    p_serve.add_argument("--reload", action="store_true")
    p_serve.set_defaults(func=cmd_serve)
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level.upper())
    args.func(args)


if __name__ == "__main__":
    main()
