#!/usr/bin/env python
"""
Gig Guide database migrations
Usage: python migrate_db.py [upgrade [revision] | downgrade [revision] | current | stamp revision]
"""
import sys
from pathlib import Path

ROOT = Path(__file__).parent
sys.path.insert(0, str(ROOT / "src"))

from alembic import command
from alembic.config import Config


def _alembic_config() -> Config:
    return Config(str(ROOT / "alembic.ini"))


def upgrade_db(revision: str = "head"):
    print(f"Upgrading Gig Guide database to {revision}...")
    command.upgrade(_alembic_config(), revision)
    print("✓ Database is up to date")


def downgrade_db(revision: str = "-1"):
    print(f"Downgrading Gig Guide database to {revision}...")
    command.downgrade(_alembic_config(), revision)
    print("✓ Downgrade complete")


def stamp_db(revision: str):
    """Record a revision without running it (for databases created with init_db)"""
    command.stamp(_alembic_config(), revision)
    print(f"✓ Database stamped at {revision}")


def show_current_revision():
    from alembic.runtime.migration import MigrationContext
    from alembic.script import ScriptDirectory
    from gig_guide.db import engine

    head = ScriptDirectory.from_config(_alembic_config()).get_current_head()
    with engine.connect() as connection:
        current = MigrationContext.configure(connection).get_current_revision()

    print(f"Current revision: {current or 'none (run upgrade)'}")
    print(f"Head revision:    {head}")


def main(argv):
    action = argv[1] if len(argv) > 1 else "upgrade"
    arg = argv[2] if len(argv) > 2 else None

    if action == "upgrade":
        upgrade_db(arg or "head")
    elif action == "downgrade":
        downgrade_db(arg or "-1")
    elif action == "current":
        show_current_revision()
    elif action == "stamp" and arg:
        stamp_db(arg)
    else:
        print(__doc__.strip().splitlines()[-1])
        sys.exit(2)


if __name__ == "__main__":
    main(sys.argv)
