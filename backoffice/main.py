"""Backoffice — FastAPI Application Entry Point.

Northwind order administration plus the exchange daily-quote table.
"""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backoffice.database import init_db, test_connection
from backoffice.scheduler.jobs import start_scheduler, stop_scheduler
from backoffice.api.order_routes import router as order_router
from backoffice.api.lookup_routes import router as lookup_router
from backoffice.api.product_routes import router as product_router
from backoffice.api.stock_routes import router as stock_router
from backoffice.core.logging import get_logger

logger = get_logger("main")

IS_SERVERLESS = bool(
    os.environ.get("VERCEL") or os.environ.get("AWS_LAMBDA_FUNCTION_NAME")
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    logger.info("🚀 Backoffice starting up...")
    db_ok = test_connection()
    if db_ok:
        try:
            init_db()
        except Exception as e:
            logger.error(f"❌ Table creation failed: {e}")
    else:
        logger.error("❌ Database NOT connected — endpoints will fail")
    if not IS_SERVERLESS:
        start_scheduler()
    yield
    if not IS_SERVERLESS:
        stop_scheduler()
    logger.info("Backoffice shut down")


app = FastAPI(
    title="Backoffice",
    description="Order administration grids, selectors and the scheduled exchange quote feed.",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(order_router)
app.include_router(lookup_router)
app.include_router(product_router)
app.include_router(stock_router)


@app.get("/health", tags=["System"])
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "backoffice",
        "version": "1.0.0",
    }
