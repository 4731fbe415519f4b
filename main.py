"""
CanvasPrint - Application Entry Point
=======================================
FastAPI app initialization, basket lifecycle, and router registration.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from config import settings
from config.database import SessionLocal, engine
from modules.basket.service import BasketStore
from modules.order.service import OrderService
from modules.storage.service import open_storage

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger("canvasprint")

# ==========================================
# Import ALL models so Base can see them
# ==========================================
from modules.storage.models import StorageEntry  # noqa: F401, E402

# ==========================================
# Import routers
# ==========================================
from modules.pricing.routes import router as pricing_router  # noqa: E402
from modules.sizing.routes import router as sizing_router  # noqa: E402
from modules.basket.routes import router as basket_router  # noqa: E402
from modules.order.routes import router as order_router  # noqa: E402


@asynccontextmanager
async def lifespan(app):
    # One basket per process; routes receive it through modules.basket.deps
    storage = open_storage(engine, SessionLocal)
    app.state.basket_store = BasketStore(storage)
    app.state.order_service = OrderService(app.state.basket_store, storage)
    logger.info(f"Basket ready ({len(app.state.basket_store.items)} item(s) restored)")
    yield
    logger.info("Shutting down")


# ==========================================
# Create App
# ==========================================
app = FastAPI(
    title="CanvasPrint",
    description="הדפסות קנבס בהתאמה אישית",
    version="1.0.0",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url=None,
    lifespan=lifespan,
)


# ==========================================
# Register Routers
# ==========================================
app.include_router(pricing_router)
app.include_router(sizing_router)
app.include_router(basket_router)
app.include_router(order_router)


# ==========================================
# Health check
# ==========================================
@app.get("/health")
async def health():
    return {"status": "ok", "version": "1.0.0"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG,
                log_level=settings.LOG_LEVEL.lower())
