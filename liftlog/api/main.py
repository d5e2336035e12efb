"""FastAPI application exposing the public JSON API."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

from liftlog.config import CONFIG, reload_config
from liftlog.logger import configure_logging

from .routes import admin, billing, profile, reports, workouts


load_dotenv()
reload_config()
configure_logging()

app = FastAPI(
    title=CONFIG.api_title,
    version=CONFIG.api_version,
    description=(
        "Workout tracker API. Free accounts may log a limited number of workouts per day; "
        "premium accounts are unlimited. Authenticate using a Supabase JWT in the Authorization header."
    ),
)


def _configure_cors(api_app: FastAPI) -> None:
    origins = list(getattr(CONFIG, "api_cors_origins", ()) or ())
    if not origins:
        return

    api_app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


_configure_cors(app)


@app.get("/health", tags=["health"])
def healthcheck() -> dict[str, str]:
    """Simple health endpoint for load balancers and smoke tests."""

    return {"status": "ok", "backend": CONFIG.database_backend}


app.include_router(profile.router, prefix="/v1", tags=["profile"])
app.include_router(workouts.router, prefix="/v1", tags=["workouts"])
app.include_router(reports.router, prefix="/v1", tags=["reports"])
app.include_router(admin.router, prefix="/v1", tags=["admin"])
app.include_router(billing.router, prefix="/v1", tags=["billing"])
