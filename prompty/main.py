import logging
from contextlib import asynccontextmanager

from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from prompty.logging_config import configure_logging
from prompty.metrics.router import MetricsRouter
from prompty.routes import api_router, page_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    logger.info("Prompty API starting")
    yield


app = FastAPI(
    title="Prompty",
    description="A catalog of prompt templates for generative-media tools",
    version="1.0.0",
    lifespan=lifespan,
)
utils_router = MetricsRouter()

app.add_middleware(CorrelationIdMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@utils_router.get("/health", tags=["public"])
async def health_check():
    return {"status": "healthy", "api": "Prompty", "version": "1.0.0"}


app.include_router(page_router)
app.include_router(api_router, prefix="/api/v1")
app.include_router(utils_router)
