from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .core.handlers import register_exception_handlers
from .lifespan import lifespan
from .middleware.auth import AuthMiddleware
from .middleware.metrics import MetricsMiddleware
from .routers import auth, chargers, ops, sessions, stations

app = FastAPI(title="EV Charging Station API", version="1.0.0", lifespan=lifespan)

register_exception_handlers(app)

# Added last runs first: CORS -> metrics -> auth -> route
app.add_middleware(AuthMiddleware)
app.add_middleware(MetricsMiddleware)

cors_origins = [origin.strip() for origin in settings.cors_allow_origins.split(",") if origin.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins or ["*"],
    allow_credentials="*" not in cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Operations routes
app.include_router(ops.router)

app.include_router(auth.router, prefix=settings.api_prefix)
app.include_router(stations.router, prefix=settings.api_prefix)
app.include_router(chargers.router, prefix=settings.api_prefix)
app.include_router(sessions.router, prefix=settings.api_prefix)
