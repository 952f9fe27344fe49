#!/usr/bin/env python
"""
Command line entry point: gig-guide serve | expire-features | seed-features
"""
import argparse
import logging
import sys
from pathlib import Path

from .config import config
from .logging_config import setup_logging

logger = logging.getLogger(__name__)


def serve(host: str, port: int):
    """Run the API server with uvicorn"""
    import uvicorn
    from .app import create_app

    logger.info(f"Starting Gig Guide API on {host}:{port}")
    uvicorn.run(create_app(), host=host, port=port, log_config=None, access_log=True)


def expire_features() -> int:
    """Mark purchased features past their end date as expired (run from cron)"""
    from .db import SessionLocal
    from .services.feature_service import FeatureService

    db = SessionLocal()
    try:
        count = FeatureService(db).expire_due()
    finally:
        db.close()
    print(f"✓ Expired {count} purchased feature(s)")
    return count


def seed_features(catalog_path: str = None):
    """Create or update the paid feature catalog from YAML"""
    from .db import SessionLocal
    from .services.feature_service import FeatureService, load_catalog

    entries = load_catalog(Path(catalog_path) if catalog_path else None)
    db = SessionLocal()
    try:
        created, updated = FeatureService(db).seed_catalog(entries)
    finally:
        db.close()
    print(f"✓ Feature catalog seeded ({created} created, {updated} updated)")
    return created, updated


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="gig-guide", description="Gig Guide API tools")
    commands = parser.add_subparsers(dest="command")

    serve_parser = commands.add_parser("serve", help="Run the API server")
    serve_parser.add_argument("--host", default="0.0.0.0")
    serve_parser.add_argument("--port", type=int, default=config.PORT)

    commands.add_parser("expire-features", help="Expire purchased features past their end date")

    seed_parser = commands.add_parser("seed-features", help="Seed the paid feature catalog")
    seed_parser.add_argument("--catalog", default=None, help="Path to a catalog YAML file")

    return parser


def run(argv=None):
    setup_logging(env=config.ENV, log_level=config.LOG_LEVEL)
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "serve":
        serve(args.host, args.port)
    elif args.command == "expire-features":
        expire_features()
    elif args.command == "seed-features":
        seed_features(args.catalog)
    else:
        parser.print_help()
        sys.exit(2)


if __name__ == "__main__":
    run()
