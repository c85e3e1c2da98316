import logging
import os

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from routers.attempts import router as attempts_router
from routers.auth import router as auth_router
from routers.health import router as health_router
from routers.results import router as results_router
from routers.submissions import router as submissions_router
from services.result_store import ResultNotFound, StoreFailure

logger = logging.getLogger("quiz-results")
logging.basicConfig(level=logging.INFO)

app = FastAPI(title="Quiz Results API")

_origins = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=_origins,
    # credentials cannot be combined with a wildcard origin
    allow_credentials="*" not in _origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ResultNotFound)
def result_not_found(request: Request, exc: ResultNotFound):
    return JSONResponse(status_code=404, content={"detail": "Result not found"})


@app.exception_handler(StoreFailure)
def store_failure(request: Request, exc: StoreFailure):
    logger.error(
        "%s %s failed: %s", request.method, request.url.path, exc, exc_info=exc.__cause__ or exc
    )
    return JSONResponse(status_code=500, content={"detail": "Server error"})


@app.get("/")
def health_root():
    return {"ok": True}


app.include_router(submissions_router)  # /api/submit, /api/check-retake/...
app.include_router(attempts_router)  # /api/attempts/...
app.include_router(results_router)  # /api/results/... (admin)
app.include_router(auth_router)  # /api/login, /api/verify-token
app.include_router(health_router)  # /health/...
