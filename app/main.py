import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from app.api.routes import router
from app.core.config import settings
from app.core.errors import RequestError

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    Open the shared outbound client on startup, close it on shutdown.
    """
    logger.info("Starting Concurrent API Fetcher...")
    # No client-level timeout: each batch is bounded by its own deadline
    app.state.http_client = httpx.AsyncClient(
        timeout=None,
        follow_redirects=True,
        headers={"User-Agent": settings.USER_AGENT},
    )

    yield

    logger.info("Shutting down Concurrent API Fetcher...")
    await app.state.http_client.aclose()

app = FastAPI(
    title="Concurrent API Fetcher",
    description="Fetch a batch of URLs concurrently and return every body or error",
    version="1.0.0",
    lifespan=lifespan
)

@app.exception_handler(RequestError)
async def request_error_handler(request: Request, exc: RequestError):
    logger.info(f"REJECTED {request.method} {request.url.path}: {exc.message}")
    return PlainTextResponse(exc.message, status_code=exc.status_code, headers=exc.headers)

app.include_router(router)

@app.get("/", response_class=PlainTextResponse)
async def root():
    """Liveness message"""
    return "Concurrent API Fetcher Server is up and running!"

if __name__ == "__main__":
    import uvicorn
    logger.info(f"Server starting on {settings.HOST}:{settings.PORT}")
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
