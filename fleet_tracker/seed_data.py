"""
Database seeding script.

Creates the system "Super Admin" role, a super admin user and the sample
dropdown taxonomy. Existing rows are left untouched, so the script can be
re-run safely.
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select
from fleet_tracker.app.db.session import AsyncSessionLocal, engine, Base
from fleet_tracker.app.models.role import Role
from fleet_tracker.app.models.user import User
from fleet_tracker.app.models.dropdown_option import DropdownOption
from fleet_tracker.app.models.enums import DropdownType, Permission
from fleet_tracker.app.core.security import get_password_hash

# Importing main registers every model with Base
from fleet_tracker.app import main  # noqa: F401

SUPER_ADMIN_ROLE = "Super Admin"
SUPER_ADMIN_EMAIL = "admin@tracker.com"
SUPER_ADMIN_PASSWORD = "admin123"

SAMPLE_OPTIONS = [
    (DropdownType.PROJECT, "Project Alpha", "PA001", 1),
    (DropdownType.PROJECT, "Project Beta", "PB002", 2),
    (DropdownType.PROJECT, "Project Gamma", "PG003", 3),
    (DropdownType.PROJECT, "Project Delta", "PD004", 4),
    (DropdownType.WAY_BRIDGE, "Way Bridge North", "WBN01", 1),
    (DropdownType.WAY_BRIDGE, "Way Bridge South", "WBS02", 2),
    (DropdownType.WAY_BRIDGE, "Way Bridge East", "WBE03", 3),
    (DropdownType.WAY_BRIDGE, "Way Bridge West", "WBW04", 4),
    (DropdownType.LOADING_POINT, "Loading Point A", "LPA01", 1),
    (DropdownType.LOADING_POINT, "Loading Point B", "LPB02", 2),
    (DropdownType.LOADING_POINT, "Loading Point C", "LPC03", 3),
    (DropdownType.LOADING_POINT, "Loading Point D", "LPD04", 4),
    (DropdownType.UNLOADING_POINT, "Unloading Point X", "UPX01", 1),
    (DropdownType.UNLOADING_POINT, "Unloading Point Y", "UPY02", 2),
    (DropdownType.UNLOADING_POINT, "Unloading Point Z", "UPZ03", 3),
    (DropdownType.TRANSPORTER, "Transporter One", "TR001", 1),
    (DropdownType.TRANSPORTER, "Transporter Two", "TR002", 2),
]


async def seed_data():
    """
    Seed the super admin and sample dropdown options.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as db:
        print("🌱 Starting seeding...")

        result = await db.execute(select(Role).where(Role.name == SUPER_ADMIN_ROLE))
        role = result.scalar_one_or_none()
        if role is None:
            role = Role(
                name=SUPER_ADMIN_ROLE,
                description="Full access to every admin feature",
                permissions=[p.value for p in Permission],
                is_system=True,
            )
            db.add(role)
            await db.flush()
            print(f"✅ Created system role '{SUPER_ADMIN_ROLE}'")

        result = await db.execute(select(User).where(User.is_super_admin.is_(True)))
        existing_admin = result.scalars().first()
        if existing_admin:
            print(f"ℹ️  Super admin already exists: {existing_admin.email}")
        else:
            db.add(User(
                email=SUPER_ADMIN_EMAIL,
                hashed_password=get_password_hash(SUPER_ADMIN_PASSWORD),
                name="Super Admin",
                role_id=role.id,
                is_admin=True,
                is_super_admin=True,
                is_active=True,
            ))
            print(f"✅ Created super admin ({SUPER_ADMIN_EMAIL} / {SUPER_ADMIN_PASSWORD})")
            print("   Change this password immediately!")

        created = 0
        for option_type, name, code, order in SAMPLE_OPTIONS:
            result = await db.execute(
                select(DropdownOption).where(DropdownOption.type == option_type, DropdownOption.name == name)
            )
            if result.scalar_one_or_none() is None:
                db.add(DropdownOption(type=option_type, name=name, code=code, order=order))
                created += 1
        print(f"✅ Inserted {created} dropdown options")

        await db.commit()
        print("\n🎉 Seeding completed successfully!")


if __name__ == "__main__":
    asyncio.run(seed_data())
