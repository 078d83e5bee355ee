"""
Telebirr Receipt Verifier - Main Application
FastAPI application for checking Ethio Telecom telebirr receipts

Run with: python main.py
Access web app at: http://localhost:3000
Access API docs at: http://localhost:3000/docs
"""

import sys
import time
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from loguru import logger

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from api.routes import error_response, router
from browser_session import BrowserSession
from receipt_errors import ErrorCode, ReceiptError
from receipt_service import ReceiptService
from settings import load_config
from utils import setup_logging

WEBAPP_PATH = Path(__file__).parent / "webapp"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Own the browser for the lifetime of the server."""
    config = app.state.config
    session = BrowserSession(config['browser'])
    app.state.receipt_service = ReceiptService(session, config)
    logger.info("Receipt service ready")
    try:
        yield
    finally:
        logger.info("Closing browser...")
        await session.close()
        logger.info("Browser closed")


def create_app(config=None) -> FastAPI:
    config = config or load_config()

    app = FastAPI(
        title="Telebirr Receipt Verifier API",
        description="Verify Ethio Telecom telebirr payment receipts",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.config = config

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.0f}ms)")
        return response

    # Mount static files for web app
    if WEBAPP_PATH.exists():
        app.mount("/static", StaticFiles(directory=str(WEBAPP_PATH)), name="static")

    # Include API routes
    app.include_router(router, prefix="/api")

    @app.get("/", tags=["Root"])
    async def root():
        """Serve the web application"""
        webapp_file = WEBAPP_PATH / "index.html"
        if webapp_file.exists():
            return FileResponse(webapp_file)
        return {
            "message": "Telebirr Receipt Verifier API",
            "version": "1.0.0",
            "docs": "/docs",
            "health": "/api/health"
        }

    @app.exception_handler(RequestValidationError)
    async def invalid_body(request: Request, exc: RequestValidationError):
        # Unparseable or mistyped body: same envelope as an empty one
        err = ReceiptError(ErrorCode.MISSING_INPUT, details=jsonable_encoder(exc.errors()))
        return error_response(err, time.perf_counter())

    @app.exception_handler(404)
    async def not_found(request: Request, exc):
        return JSONResponse(
            status_code=404,
            content={
                "success": False,
                "error": {
                    "code": "NOT_FOUND",
                    "message": "The requested resource was not found.",
                },
            },
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    config = app.state.config
    setup_logging(config['logging']['file'], config['logging']['level'])

    logger.info("=" * 60)
    logger.info("Telebirr Receipt Verification Server")
    logger.info(f"Running on: http://{config['server']['host']}:{config['server']['port']}")
    logger.info(f"Environment: {config['server']['environment']}")
    logger.info("  POST /api/check-receipt   - Check by URL or code")
    logger.info("  GET  /api/receipt/{code}  - Get receipt by code")
    logger.info("  GET  /api/health          - Health check")
    logger.info("  GET  /api/error-codes     - List all error codes")
    logger.info("=" * 60)

    uvicorn.run(app, host=config['server']['host'], port=config['server']['port'])
