import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from app.analytics.router import router as analytics_router
from app.auth.router import router as auth_router
from app.config import get_settings
from app.content.router import router as content_router
from app.courses.router import router as courses_router
from app.database import init_db
from app.enrollment.router import router as enrollment_router
from app.grading.router import router as grading_router
from app.notifications.router import router as notifications_router
from app.rate_limit import limiter
from app.users.router import router as users_router
from app.verification.admin_router import router as verification_admin_router
from app.verification.router import router as verification_router
from shared.middleware import (
    error_envelope_middleware,
    install_error_handlers,
    request_id_middleware,
)

logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(levelname)s:%(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# ── OpenAPI metadata ──────────────────────────────────────────────────────────

_DESCRIPTION = """
## LMS Service

Courses organised as Course → Module → Lecture → Resource, with:

* **Publish gating** — modules and lectures start as drafts; students only see
  published modules and only open published lectures of courses they are enrolled in.
* **Enrollment** — seat-limited; the capacity check and counter update are atomic.
* **Instructor verification** — document upload, admin review, approve / reject / reset.
* **Notifications** — per-user inbox, admin fan-out for review work.
* **Performance** — completion, submission and grade aggregates per course.

### Authentication
```
Authorization: Bearer <access_token>
```

### Error shape
```json
{ "message": "Human-readable message", "errors": [{"field": "...", "message": "..."}], "request_id": "..." }
```
`errors` is present for validation failures (400).
"""


class HealthResponse(BaseModel):
    status: str
    service: str


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    init_db(settings.lms_database_url)
    logger.info("LMS service started (%s)", settings.env_name)
    yield


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title="LMS Service",
        version="1.0.0",
        description=_DESCRIPTION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    install_error_handlers(app)

    # Middleware is applied in reverse-registration order (last added = outermost).
    app.add_middleware(SlowAPIMiddleware)
    app.middleware("http")(error_envelope_middleware)
    app.middleware("http")(request_id_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=600,
    )

    app.include_router(auth_router, prefix="/api/v1")
    app.include_router(verification_router, prefix="/api/v1")
    app.include_router(verification_admin_router, prefix="/api/v1")
    app.include_router(users_router, prefix="/api/v1")
    app.include_router(courses_router, prefix="/api/v1")
    app.include_router(analytics_router, prefix="/api/v1")
    app.include_router(content_router, prefix="/api/v1")
    app.include_router(enrollment_router, prefix="/api/v1")
    app.include_router(grading_router, prefix="/api/v1")
    app.include_router(notifications_router, prefix="/api/v1")

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", service="lms")

    return app


app = create_app()
