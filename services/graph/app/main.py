import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from app.config import get_settings
from app.database import init_db
from app.rate_limit import limiter
from app.profiles.router import router as profile_router
from app.social_graph.router import reports_router as social_reports_router
from app.social_graph.router import router as social_router
from app.social_graph.admin_router import router as social_admin_router
from shared.middleware.request_id import request_id_middleware
from shared.middleware.error_handler import error_envelope_middleware


# ── OpenAPI metadata ──────────────────────────────────────────────────────────

_DESCRIPTION = """
## Snacc Graph Service

Owns the social graph between accounts:

* **Relationships**: directed follow edges and directed block edges, resolved into
  one of `none`, `following`, `follower`, `mutual`, `blocked`, `blocked_by` plus the
  actions the viewer may take. A block in either direction always wins over follows.
* **Messaging eligibility**: direct messages need a mutual follow and no block.
* **Lists**: who I follow, who follows me, who I blocked.
* **Reports**: report a user from a profile, snacc, message or video call.

### Authentication
All endpoints except `/health` require:
```
Authorization: Bearer <access_token>
```
Admin endpoints additionally require the `admin` or `super_admin` role in the token.

### Error shape
Domain errors return `{ "detail": "Human-readable message" }` with status
`403` / `404` / `409` / `422` / `503`. Unhandled errors return
`{ "error": {"code", "message"}, "request_id" }` with status `500`.

### Rate limits
Follow is limited to 50 requests per hour. `429 Too Many Requests` is returned when
the limit is exceeded.
"""

_TAGS_METADATA = [
    {
        "name": "profile",
        "description": (
            "`GET /users/{user_id}` returns another user's public profile together with "
            "your relationship to them (404 if that user has blocked you)."
        ),
    },
    {
        "name": "social-graph",
        "description": (
            "Follows, blocks, relationship state, messaging eligibility and user reports. "
            "Blocking hides the blocker's profile and follow lists from the blocked user "
            "with a 404. Unblocking never restores follows."
        ),
    },
    {
        "name": "admin-social-graph",
        "description": "**Admin only.** Repair cached follower/following counters.",
    },
]


# ── Health schema ─────────────────────────────────────────────────────────────

class HealthResponse(BaseModel):
    status: str
    service: str


# ── App factory ───────────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logging.getLogger("app").setLevel(settings.log_level.upper())
    init_db(settings.graph_database_url)
    yield


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title="Snacc Graph Service",
        version="1.0.0",
        description=_DESCRIPTION,
        openapi_tags=_TAGS_METADATA,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Attach rate limiter state before middleware
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Middleware is applied in reverse-registration order (last added = outermost).
    # CORS must be outermost so ALL responses (including 429s) carry CORS headers.
    app.add_middleware(SlowAPIMiddleware)
    app.middleware("http")(request_id_middleware)
    app.middleware("http")(error_envelope_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=600,
    )

    # social_router first: its /users/me/... paths must win over /users/{user_id}.
    app.include_router(social_router, prefix="/api/v1")
    app.include_router(social_reports_router, prefix="/api/v1")
    app.include_router(profile_router, prefix="/api/v1")
    app.include_router(social_admin_router, prefix="/api/v1")

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", service="graph")

    return app


app = create_app()
