"""
ReceiptVault backend — FastAPI application entry-point.
"""
import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from receiptvault import __version__
from receiptvault.config import settings
from receiptvault.database import init_db
from receiptvault.errors import PersistenceError, ReceiptVaultError

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(name)-30s  %(levelname)-5s  %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: ensure data dir + tables exist
    os.makedirs(settings.DATA_DIR, exist_ok=True)
    init_db()
    logger.info("Database tables ready (%s)", settings.DATABASE_URL)
    if not settings.GOOGLE_CLIENT_ID:
        logger.warning("GOOGLE_CLIENT_ID is not set; every sign-in will be rejected")
    if not settings.EXTRACT_API_KEY:
        logger.warning("EXTRACT_API_KEY is not set; extraction requests will fail")
    yield
    logger.info("Shutting down")


app = FastAPI(
    title="ReceiptVault",
    description="Google sign-in → receipt photo → parse → extract → stored receipt",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Error mapping ────────────────────────────────────────────────────────
@app.exception_handler(ReceiptVaultError)
async def receiptvault_error_handler(request: Request, exc: ReceiptVaultError):
    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        "%s %s -> %d %s: %s",
        request.method, request.url.path, exc.status_code, type(exc).__name__, exc.detail or exc.message,
    )
    content = {"error": exc.message}
    if isinstance(exc, PersistenceError) and exc.payload:
        # The extraction still reaches the caller, just without a receipt id
        content = {**exc.payload, **content}
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.get("/")
async def root():
    return {"service": "ReceiptVault", "version": __version__, "status": "running"}


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


# ── Register routers ─────────────────────────────────────────────────────
from receiptvault.routers.auth import router as auth_router  # noqa: E402
from receiptvault.routers.receipts import router as receipts_router  # noqa: E402

app.include_router(auth_router, tags=["Auth"])
app.include_router(receipts_router, prefix="/api", tags=["Receipts"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("receiptvault.main:app", host="0.0.0.0", port=8000, reload=settings.DEBUG)
