# main.py
import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import AUTO_CREATE_TABLES, CORS_ORIGINS
from database import Base, engine
import models  # noqa: F401  ลงทะเบียนตารางกับ Base
from logging_setup import configure_logging
from routers import api_router
from schemas import HealthOut

logger = logging.getLogger(__name__)

_started = time.monotonic()


# ------------------------------
# App bootstrap
# ------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    if AUTO_CREATE_TABLES:
        Base.metadata.create_all(bind=engine)
    logger.info("Vending Ops API started (db=%s)", engine.url.render_as_string(hide_password=True))
    yield
    logger.info("Vending Ops API stopped")


app = FastAPI(title="Vending Ops API", version="1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ------------------------------
# Errors
# ------------------------------
@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"detail": "Invalid request data", "errors": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# ------------------------------
# Routes
# ------------------------------
@app.get("/", include_in_schema=False)
def root():
    return {"message": "Vending Ops API is running"}


@app.get("/health", response_model=HealthOut)
def health():
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - _started, 3),
    }


app.include_router(api_router, prefix="/api")
