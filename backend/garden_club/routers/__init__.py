from garden_club.routers.auth import router as auth_router
from garden_club.routers.plants import router as plants_router
from garden_club.routers.plant_care import router as plant_care_router
from garden_club.routers.check_in import router as check_in_router
from garden_club.routers.activity import router as activity_router
from garden_club.routers.cron import router as cron_router
from garden_club.routers.admin import router as admin_router
from garden_club.routers.site_content import router as site_content_router
from garden_club.routers.uploads import router as uploads_router

__all__ = [
    "auth_router", "plants_router", "plant_care_router", "check_in_router", "activity_router",
    "cron_router", "admin_router", "site_content_router", "uploads_router",
]
