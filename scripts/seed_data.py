"""Seed the database with The Aura Inn's admin account, rooms and site content.

Run from the project root:
    python -m scripts.seed_data

Environment overrides for the admin account: ``SEED_ADMIN_EMAIL``,
``SEED_ADMIN_PASSWORD``.
"""

import asyncio
import os
import sys
from pathlib import Path

# Add project root to path so imports work when run as a script
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import delete, select

from aura_inn.auth.passwords import hash_password
from aura_inn.config import settings
from aura_inn.database import Base, async_session_factory, engine
from aura_inn.models.room_type import RoomType
from aura_inn.models.user import User
from aura_inn.services.site_content import put_document

# ---------------------------------------------------------------------------
# Seed data definitions
# ---------------------------------------------------------------------------

ADMIN_USER = {
    "email": os.getenv("SEED_ADMIN_EMAIL", "admin@theaurainn.com"),
    "password": os.getenv("SEED_ADMIN_PASSWORD", "aurainn1234"),
    "name": "Front Desk Admin",
}

ROOM_TYPES = [
    {
        "name": "Standard",
        "price": 3500,
        "description": "Cosy room with a queen bed, work desk and garden view.",
        "capacity": 2,
        "image_url": "/images/rooms/standard.jpg",
        "assigned_rooms": ["101", "102", "103"],
    },
    {
        "name": "Deluxe",
        "price": 5000,
        "description": "Spacious king room with a private balcony and rain shower.",
        "capacity": 3,
        "image_url": "/images/rooms/deluxe.jpg",
        "assigned_rooms": ["201", "202", "203"],
    },
    {
        "name": "Family Suite",
        "price": 7500,
        "description": "Two connected bedrooms and a lounge, ideal for families.",
        "capacity": 5,
        "image_url": "/images/rooms/family-suite.jpg",
        "assigned_rooms": ["301", "302"],
    },
]

FLOORS = [
    {
        "name": "Ground Floor",
        "rooms": ["101", "102", "103"],
        "roomStatuses": {"101": "Available", "102": "Occupied", "103": "Available"},
    },
    {
        "name": "First Floor",
        "rooms": ["201", "202", "203"],
        "roomStatuses": {"201": "Occupied", "202": "Available", "203": "Maintenance"},
    },
    {
        "name": "Second Floor",
        "rooms": ["301", "302"],
        "roomStatuses": {"301": "Available", "302": "Available"},
    },
]

DOCUMENTS = {
    "generalData": {
        "hotelName": "The Aura Inn",
        "phone": "+91 98765 43210",
        "email": "stay@theaurainn.com",
        "address": "12 Lake View Road, Udaipur, Rajasthan",
        "checkInTime": "12:00",
        "checkOutTime": "11:00",
    },
    "homeData": {
        "heroTitle": "Welcome to The Aura Inn",
        "heroSubtitle": "Lakeside calm, ten minutes from the old city.",
        "directBookingBanner": "Book direct and save 20%",
    },
    "aboutData": {
        "title": "About Us",
        "body": "A family-run inn with eight rooms, home-cooked breakfasts and airport pickup on request.",
    },
    "reviews": [
        {"name": "Priya S.", "rating": 5, "text": "Spotless rooms and the warmest hosts."},
        {"name": "Daniel K.", "rating": 4, "text": "Great breakfast, easy pickup from the airport."},
    ],
}


# ---------------------------------------------------------------------------
# Main seed function
# ---------------------------------------------------------------------------


async def seed() -> None:
    """Populate the database with the admin account, room types and content.

    Idempotent: replaces the admin user, room types and site documents on
    every run. Bookings are left untouched.
    """
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session_factory() as session:
        # ------------------------------------------------------------------
        # 1. Admin user
        # ------------------------------------------------------------------
        result = await session.execute(select(User).where(User.email == ADMIN_USER["email"]))
        existing_user = result.scalar_one_or_none()
        if existing_user is not None:
            print(f"⚠️  Admin user '{ADMIN_USER['email']}' already exists. Resetting password...")
            existing_user.hashed_password = hash_password(ADMIN_USER["password"])
            existing_user.is_active = True
            existing_user.role = "admin"
        else:
            session.add(
                User(
                    email=ADMIN_USER["email"],
                    hashed_password=hash_password(ADMIN_USER["password"]),
                    name=ADMIN_USER["name"],
                    is_active=True,
                    role="admin",
                )
            )
        await session.flush()
        print(f"✅ Admin user ready: {ADMIN_USER['email']}")

        # ------------------------------------------------------------------
        # 2. Room types
        # ------------------------------------------------------------------
        await session.execute(delete(RoomType))
        for room_data in ROOM_TYPES:
            session.add(RoomType(**room_data))
            print(f"   🛏️  {room_data['name']} (₹{room_data['price']}/night)")
        await session.flush()

        # ------------------------------------------------------------------
        # 3. Floors and site content
        # ------------------------------------------------------------------
        await put_document(session, "floors", FLOORS)
        for key, data in DOCUMENTS.items():
            await put_document(session, key, data)

        await session.commit()

    print()
    print("=" * 60)
    print("📊 Seed Summary")
    print("=" * 60)
    print(f"   Admin:       {ADMIN_USER['email']}")
    print(f"   Room types:  {len(ROOM_TYPES)}")
    print(f"   Floors:      {len(FLOORS)}")
    print(f"   Documents:   {len(DOCUMENTS) + 1}")
    print("=" * 60)
    print("🎉 Done! Sign in at /api/v1/auth/login")

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(seed())
