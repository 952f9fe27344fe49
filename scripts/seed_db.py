#!/usr/bin/env python
"""
Database seeding script
Creates an admin account and the paid feature catalog for development/testing
"""
import os
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from gig_guide.auth import get_password_hash
from gig_guide.db import SessionLocal, User
from gig_guide.db.models import UserRole
from gig_guide.services.feature_service import FeatureService, load_catalog

ADMIN_EMAIL = os.getenv("SEED_ADMIN_EMAIL", "admin@example.com")
ADMIN_PASSWORD = os.getenv("SEED_ADMIN_PASSWORD", "adminpassword123")


def seed_database():
    """Seed database with initial data"""
    db = SessionLocal()

    try:
        print("Seeding database with initial data...")

        admin = db.query(User).filter(User.email == ADMIN_EMAIL).first()
        if admin is None:
            admin = User(
                email=ADMIN_EMAIL,
                username="admin",
                hashed_password=get_password_hash(ADMIN_PASSWORD),
                role=UserRole.ADMIN.value,
                is_active=True,
                email_verified=True,
            )
            db.add(admin)
            db.commit()
            print(f"  Created admin user: {ADMIN_EMAIL} / {ADMIN_PASSWORD}")
        else:
            print(f"⚠️  Admin user {ADMIN_EMAIL} already exists. Skipping.")

        created, updated = FeatureService(db).seed_catalog(load_catalog())
        print(f"  Paid features: {created} created, {updated} updated")
        print("✓ Database seeded successfully!")

    except Exception as e:
        print(f"❌ Error seeding database: {e}", file=sys.stderr)
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed_database()
