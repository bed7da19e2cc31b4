from fastapi import FastAPI, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException

from vine_portal.db.base import get_db
from vine_portal.core.config import settings
from vine_portal.core.log import configure_logging
from vine_portal.routers import visitors as visitors_router
from vine_portal.routers import check_ins as check_ins_router
from vine_portal.routers import schedule as schedule_router
from vine_portal.routers import people as people_router
from vine_portal.routers import profile as profile_router
from vine_portal.core.errors import (
    PortalException,
    http_exception_handler,
    portal_exception_handler,
    request_id_for,
    validation_exception_handler,
    unhandled_exception_handler,
)

configure_logging()

app = FastAPI(
    title="Vine Portal API",
    description=(
        "**Vine Church member portal**\n\n"
        "Visitor registration, kids check-in, member directory and schedule "
        "maintenance behind a bearer-token / role gateway.\n\n"
        "Every response is an envelope: `{success: true, data, requestId}` or "
        "`{success: false, error: {code, type, message, details, requestId, timestamp}}`."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)


# --- Request id (fresh per request, echoed in envelopes and this header) ---
@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    request_id = request_id_for(request)
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


# --- Exception handlers (most specific first) ---
app.add_exception_handler(PortalException, portal_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# --- Routers ---
app.include_router(visitors_router.router)
app.include_router(check_ins_router.router)
app.include_router(schedule_router.router)
app.include_router(people_router.router)
app.include_router(profile_router.router)


@app.get("/health", tags=["health"], summary="Health check")
def health(db: Session = Depends(get_db)):
    """
    Returns `{"status": "ok", "db": "ok"}` when both the API and the database
    are reachable. Returns HTTP 503 if the DB is down.
    """
    try:
        db.execute(text("SELECT 1"))
        db_status = "ok"
    except Exception:
        db_status = "unreachable"

    if db_status != "ok":
        return JSONResponse(
            status_code=503,
            content={"status": "error", "db": db_status},
        )
    return {"status": "ok", "db": "ok", "env": settings.APP_ENV}
