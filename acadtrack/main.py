import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from acadtrack.core.config import settings
from acadtrack.core.errors import ErrorKind, GradingError
from acadtrack.core.logging_middleware import LoggingMiddleware
from acadtrack.db.init_db import init_db
from acadtrack.routers.auth import router as auth_router
from acadtrack.routers.grading import router as grading_router
from acadtrack.routers.penalties import router as penalties_router
from acadtrack.routers.tasks import router as tasks_router

logging.basicConfig(level=logging.INFO)

app = FastAPI(title=settings.PROJECT_NAME)

# Middleware
app.add_middleware(LoggingMiddleware)

ERROR_STATUS = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.PRECONDITION: 409,
    ErrorKind.AUTHORIZATION: 403,
    ErrorKind.VALIDATION: 422,
    ErrorKind.CONFLICT: 409,
}


@app.exception_handler(GradingError)
async def grading_error_handler(request: Request, exc: GradingError):
    return JSONResponse(
        status_code=ERROR_STATUS[exc.kind],
        content={"detail": exc.message, "error": exc.kind.value},
    )


# Health check
@app.get("/health")
def health():
    return {"status": "ok"}


# Startup event
@app.on_event("startup")
def on_startup():
    init_db()


# Include routers
app.include_router(auth_router, prefix="/auth", tags=["auth"])
app.include_router(grading_router, prefix="/grading", tags=["grading"])
app.include_router(penalties_router, prefix="/penalties", tags=["penalties"])
app.include_router(tasks_router, prefix="/tasks", tags=["tasks"])
