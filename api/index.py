"""
ElectroMart - Main FastAPI Application

Single entry point for catalog, cart, checkout, auth and admin routes.
"""
from contextlib import asynccontextmanager

from dotenv import load_dotenv

# Before electromart imports: db.py reads the environment at import time
load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from electromart.cart import reset_cart_managers
from electromart.logging import get_logger
from electromart.routers import (
    admin_router,
    auth_router,
    cart_router,
    checkout_router,
    products_router,
)
from electromart.services.database import close_database, init_database

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler"""
    await init_database()
    yield
    reset_cart_managers()
    close_database()


app = FastAPI(
    title="ElectroMart",
    description="Electronics storefront API",
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

app.include_router(products_router)
app.include_router(cart_router)
app.include_router(checkout_router)
app.include_router(auth_router)
app.include_router(admin_router)


# ==================== HEALTH CHECK ====================

@app.get("/api/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok", "service": "electromart"}
