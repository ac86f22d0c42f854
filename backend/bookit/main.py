# backend/bookit/main.py

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bookit.api.routes import routers
from bookit.core.exception_handlers import register_exception_handlers
from bookit.core.health_checks import check_profile_store
from bookit.core.logging_config import get_loggers
from bookit.core.middleware import MaxBodySizeMiddleware
from bookit.core.settings import get_settings
from bookit.db.profile_store import get_profile_store

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # --- startup ---
    logger_generic, logger_errors, _ = get_loggers()
    store_status = await check_profile_store(get_profile_store())
    if store_status == "ok":
        logger_generic.info("%s started (store=%s)", settings.app_name, settings.profile_store_backend)
    else:
        # L'API démarre quand même ; /health renverra 503
        logger_errors.error("Profile store unreachable at startup: %s", store_status)

    yield  # l'app tourne ici

    # --- shutdown ---
    logger_generic.info("%s stopped", settings.app_name)


app = FastAPI(title=f"{settings.app_name} API", version=settings.app_version, lifespan=lifespan)
# ⚠️ Ordre des middlewares = ordre d'ajout.
app.add_middleware(
    MaxBodySizeMiddleware,
    max_body_size=settings.max_body_bytes,
    exclude_paths=("/health",),
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

for r in routers:
    app.include_router(r)
