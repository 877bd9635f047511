from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from wingplan.lib.config import settings
from wingplan.lib.database import engine, init_models
from wingplan.lib.logging_config import setup_logging
from wingplan.features.projects.routes import router as projects_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging and create tables on startup."""
    setup_logging(level=settings.log_level, json_format=settings.log_json)
    await init_models()
    logger.info("Wingplan API started")
    yield
    await engine.dispose()


app = FastAPI(
    title="Wingplan API",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(projects_router, prefix="/api", tags=["Projects"])


@app.get("/")
async def root():
    return {"message": "Wingplan API", "docs": "/docs"}


@app.get("/api/health", tags=["Health"])
async def health():
    return {"status": "healthy"}
