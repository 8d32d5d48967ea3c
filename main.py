from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.config import configure_logging, settings
from core.exceptions import StudyBuddyError
from routers import (
    auth as auth_router,
    flashcard as flashcard_router,
    study as study_router,
)

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.ENVIRONMENT)
    logger.info("app_started", environment=settings.ENVIRONMENT, ai_enabled=settings.ai_enabled)
    yield


app = FastAPI(title="StudyBuddy", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router.router)
app.include_router(flashcard_router.router)
app.include_router(flashcard_router.topics_router)
app.include_router(study_router.router)


@app.exception_handler(StudyBuddyError)
async def studybuddy_error_handler(request: Request, exc: StudyBuddyError):
    if exc.status_code >= 500:
        logger.error("request_failed", path=request.url.path, error=exc.message, status_code=exc.status_code)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.get("/status")
async def status():
    return {"status": "ok"}


if __name__ == "__main__":
    uvicorn.run("main:app", reload=True, host="127.0.0.1", port=8000)
