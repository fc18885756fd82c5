#!/usr/bin/env python
"""
Database Initialization Script

This script initializes the FitCoach database:
1. Creates the PostgreSQL database if it doesn't exist
2. Creates the schema from the SQLAlchemy models
3. Optionally seeds the billing plans
4. Optionally creates the super-admin account
5. Optionally creates a demo tenant with its owner admin

Usage:
    # Initialize schema only
    python scripts/init_db.py

    # Schema, plans and super-admin
    python scripts/init_db.py --seed-plans --create-admin

    # Everything, non-interactive (use environment variables)
    ADMIN_EMAIL=admin@fitcoach.app ADMIN_PASSWORD=password123 \
    python scripts/init_db.py --seed-plans --create-admin --create-demo-tenant --non-interactive

Environment Variables:
    ADMIN_EMAIL: Email for the super-admin (default: admin@fitcoach.app)
    ADMIN_PASSWORD: Password for the super-admin (default: prompted)
    ADMIN_NAME: Display name (default: Platform Admin)
    DEMO_TENANT_NAME: Name for the demo tenant (default: Demo Gym)
    DEMO_OWNER_EMAIL: Owner email of the demo tenant (default: owner@demo.fitcoach.app)
    DEMO_OWNER_PASSWORD: Owner password of the demo tenant (default: ChangeMe123)
"""

import os
import sys
import argparse
import getpass
from pathlib import Path

from dotenv import load_dotenv

# Add backend directory to Python path
backend_dir = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(backend_dir))

load_dotenv()

from sqlalchemy import create_engine, text  # noqa: E402
from sqlalchemy.exc import OperationalError  # noqa: E402
from fitcoach import create_app  # noqa: E402
from fitcoach.extensions import db  # noqa: E402
from fitcoach.models import Plan, Tenant, User  # noqa: E402
from fitcoach.models.user import ROLE_SUPER_ADMIN  # noqa: E402
from fitcoach.services.tenant_service import TenantService  # noqa: E402

DEFAULT_PLANS = [
    {
        'name': 'Starter', 'slug': 'starter', 'price_cents': 4900, 'interval': 'monthly',
        'features': ['Up to 20 students', 'Workouts and assessments', 'Chat'],
    },
    {
        'name': 'Pro', 'slug': 'pro', 'price_cents': 9900, 'interval': 'monthly',
        'features': ['Up to 100 students', 'Agenda and bookings', 'Auto messages'],
    },
    {
        'name': 'Enterprise', 'slug': 'enterprise', 'price_cents': 24900, 'interval': 'monthly',
        'features': ['Unlimited students', 'Multiple trainers', 'Custom branding'],
    },
]


def parse_args():
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description='Initialize FitCoach database',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument('--seed-plans', action='store_true', help='Create the default billing plans')
    parser.add_argument('--create-admin', action='store_true', help='Create the super-admin account')
    parser.add_argument('--create-demo-tenant', action='store_true', help='Create a demo tenant and its owner')
    parser.add_argument('--drop-all', action='store_true', help='Drop all existing data before initialization (DANGEROUS!)')
    parser.add_argument('--non-interactive', action='store_true', help='Non-interactive mode (use environment variables)')
    parser.add_argument(
        '--config',
        default='development',
        choices=['development', 'production', 'testing'],
        help='Configuration to use (default: development)'
    )
    return parser.parse_args()


def create_database_if_not_exists(database_url):
    """
    Create the PostgreSQL database if it doesn't exist.

    Returns:
        bool: True if database was created, False if it already existed
    """
    print("\n" + "=" * 60)
    print("STEP 1: Checking if database exists")
    print("=" * 60)

    if not database_url.startswith('postgresql'):
        print("Not a PostgreSQL URL, skipping database creation")
        return False

    base_url = database_url.rsplit('/', 1)[0]
    db_name = database_url.rsplit('/', 1)[1].split('?')[0]

    engine = create_engine(f"{base_url}/postgres", isolation_level="AUTOCOMMIT")
    try:
        with engine.connect() as conn:
            exists = conn.execute(
                text("SELECT 1 FROM pg_database WHERE datname = :dbname"),
                {"dbname": db_name}
            ).fetchone() is not None

            if exists:
                print(f"✓ Database '{db_name}' already exists")
                return False

            conn.execute(text(f'CREATE DATABASE "{db_name}"'))
            print(f"✓ Database '{db_name}' created successfully")
            return True

    except OperationalError as e:
        print(f"ERROR: Could not connect to PostgreSQL: {e}")
        print("\nTroubleshooting:")
        print("1. Ensure PostgreSQL is running")
        print("2. Check DATABASE_URL in .env file")
        sys.exit(1)
    finally:
        engine.dispose()


def create_schema(app, drop_all=False):
    """Create every table declared by the models."""
    print("\n" + "=" * 60)
    print("STEP 2: Creating schema")
    print("=" * 60)

    with app.app_context():
        if drop_all:
            response = input("\nType 'DELETE EVERYTHING' to drop all data: ").strip()
            if response != 'DELETE EVERYTHING':
                print("Aborted. No data was deleted.")
                sys.exit(1)
            db.drop_all()
            print("✓ All tables dropped")

        db.create_all()
        tables = sorted(db.metadata.tables)
        print(f"✓ Schema ready ({len(tables)} tables)")
        for table in tables:
            print(f"  - {table}")


def seed_plans(app):
    """Create the default plans that do not exist yet."""
    print("\n" + "=" * 60)
    print("STEP 3: Seeding plans")
    print("=" * 60)

    with app.app_context():
        for data in DEFAULT_PLANS:
            if Plan.query.filter_by(slug=data['slug']).first():
                print(f"✓ Plan already exists: {data['slug']}")
                continue
            db.session.add(Plan(**data))
            print(f"✓ Plan created: {data['slug']}")
        db.session.commit()


def create_super_admin(app, interactive=True):
    """
    Create the platform super-admin.

    Returns:
        User id or None on failure
    """
    print("\n" + "=" * 60)
    print("STEP 4: Creating super-admin")
    print("=" * 60)

    if interactive:
        email = input("Email (default: admin@fitcoach.app): ").strip() or "admin@fitcoach.app"
        name = input("Name (default: Platform Admin): ").strip() or "Platform Admin"
        password = getpass.getpass("Password (min 8 chars): ").strip()
    else:
        email = os.getenv('ADMIN_EMAIL', 'admin@fitcoach.app')
        name = os.getenv('ADMIN_NAME', 'Platform Admin')
        password = os.getenv('ADMIN_PASSWORD')

    if not password or len(password) < 8:
        print("ERROR: Password must be at least 8 characters")
        return None

    with app.app_context():
        existing = User.find_by_email(email)
        if existing:
            print(f"✓ Super-admin already exists: {email}")
            return existing.id

        try:
            user = User(full_name=name, email=email, role=ROLE_SUPER_ADMIN, is_active=True)
            user.set_password(password)
            db.session.add(user)
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            print(f"ERROR: Failed to create super-admin: {e}")
            return None

        print(f"✓ Super-admin created: {user.email} ({user.id})")
        return user.id


def create_demo_tenant(app, admin_id):
    """Create a demo tenant with its owner admin through the back-office service."""
    print("\n" + "=" * 60)
    print("STEP 5: Creating demo tenant")
    print("=" * 60)

    with app.app_context():
        name = os.getenv('DEMO_TENANT_NAME', 'Demo Gym')
        if Tenant.query.filter_by(name=name).first():
            print(f"✓ Demo tenant already exists: {name}")
            return

        actor = db.session.get(User, admin_id)
        result, error = TenantService.create_tenant({
            'name': name,
            'type': 'academy',
            'plan': 'pro',
            'owner_name': 'Demo Owner',
            'owner_email': os.getenv('DEMO_OWNER_EMAIL', 'owner@demo.fitcoach.app'),
            'owner_password': os.getenv('DEMO_OWNER_PASSWORD', 'ChangeMe123'),
        }, actor)
        if error:
            print(f"ERROR: {error}")
            return

        print(f"✓ Demo tenant created: {result['tenant']['name']}")
        print(f"   Owner: {result['owner']['email']}")


def main():
    """Main initialization routine."""
    args = parse_args()

    print("=" * 60)
    print("FitCoach Database Initialization")
    print("=" * 60)
    print(f"Configuration: {args.config}")

    app = create_app(args.config)

    database_url = app.config.get('SQLALCHEMY_DATABASE_URI')
    if not database_url:
        print("ERROR: SQLALCHEMY_DATABASE_URI not configured")
        sys.exit(1)

    create_database_if_not_exists(database_url)
    create_schema(app, drop_all=args.drop_all)

    if args.seed_plans:
        seed_plans(app)

    admin_id = None
    if args.create_admin:
        admin_id = create_super_admin(app, interactive=not args.non_interactive)

    if args.create_demo_tenant:
        if not admin_id:
            print("\nERROR: Cannot create demo tenant without the super-admin (use --create-admin)")
        else:
            create_demo_tenant(app, admin_id)

    print("\n" + "=" * 60)
    print("INITIALIZATION COMPLETE")
    print("=" * 60)
    print("\nNext steps:")
    print("1. Start the Flask API: python run.py")
    print("2. Start the Celery worker: celery -A celery_worker.celery worker -Q notifications,maintenance")
    print("3. Start Celery beat: celery -A celery_worker.celery beat")
    print("\nLogin endpoint: POST http://localhost:4999/api/auth/login")


if __name__ == '__main__':
    try:
        main()
    except KeyboardInterrupt:
        print("\n\nInitialization cancelled by user")
        sys.exit(1)
