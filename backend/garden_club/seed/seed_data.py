"""
Seed data script for the garden club database.
Creates an admin account, a sample plant with an ongoing watering
assignment, and the default site content.
"""
import os

from garden_club.auth import hash_password
from garden_club.clock import club_today
from garden_club.database import SessionLocal
from garden_club.models import Plant, PlantCare, Role, User
from garden_club.services.site_content import seed_defaults

ADMIN_EMAIL = os.environ.get("SEED_ADMIN_EMAIL", "admin@gardenclub.local")
ADMIN_PASSWORD = os.environ.get("SEED_ADMIN_PASSWORD", "change-me-admin")


def seed_database():
    """Seed the database with initial club data."""
    session = SessionLocal()
    try:
        admin = session.query(User).filter(User.email == ADMIN_EMAIL).first()
        if not admin:
            admin = User(
                name="Club Admin",
                email=ADMIN_EMAIL,
                password_hash=hash_password(ADMIN_PASSWORD),
                role=Role.ADMIN,
            )
            session.add(admin)
            session.commit()
            print(f"Created admin user: {admin.email}")
        else:
            print(f"Admin user already exists: {admin.email}")

        plant = session.query(Plant).filter(Plant.name == "Test Plant").first()
        if not plant:
            plant = Plant(
                name="Test Plant",
                description="A test plant for development",
                water_amount="200 ml",
                water_schedule="Every Monday and Thursday",
                image_url="https://images.unsplash.com/photo-1585320806297-9794b3e4eeae",
            )
            session.add(plant)
            session.commit()
            print(f"Created test plant: {plant.name}")
        else:
            print(f"Test plant already exists: {plant.name}")

        existing_care = (
            session.query(PlantCare)
            .filter(PlantCare.user_id == admin.id, PlantCare.plant_id == plant.id)
            .first()
        )
        if not existing_care:
            session.add(PlantCare(user_id=admin.id, plant_id=plant.id, start_date=club_today()))
            session.commit()
            print("Created ongoing plant care assignment")

        added = seed_defaults(session)
        if added:
            print(f"Initialized {added} site content documents")
        print("Seeding complete!")
    finally:
        session.close()


if __name__ == "__main__":
    seed_database()
