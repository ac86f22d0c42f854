# backend/bookit/api/routes/__init__.py

from .health import router as health_router
from .my_challenges import router as my_challenges_router
from .my_profile import router as my_profile_router
from .my_reading_log import router as my_reading_log_router

routers = [
    health_router,
    my_profile_router,
    my_challenges_router,
    my_reading_log_router,
]
