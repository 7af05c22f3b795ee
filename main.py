"""USPS Validator – FastAPI application entry point."""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from config import get_settings
from logging_config import get_logger, setup_logging
from routers import validate

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    logger.info("USPS Validator started", port=settings.port)
    yield


app = FastAPI(
    title="USPS Validator",
    description="Standardize SugarCRM contact addresses with the USPS Addresses API.",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(validate.router)


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=get_settings().port)
