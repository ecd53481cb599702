from slowapi import Limiter
from slowapi.util import get_remote_address

from garden_club.config import get_settings

# Rate limiter shared by all routers; registered on app.state in main
limiter = Limiter(key_func=get_remote_address, enabled=get_settings().rate_limit_enabled)
