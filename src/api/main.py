"""
FastAPI application - Main entry point
"""

from dotenv import load_dotenv

load_dotenv()

import logging

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.dependencies import get_payment_store
from src.api.endpoints.newsletter import newsletter_api
from src.api.endpoints.orders import orders_api
from src.api.endpoints.payments import payments_api
from src.utils.config_loader import Settings, get_settings

settings = get_settings()

# Setup logging
logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO))
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="44 Bulldogs Store Gateway",
    description="Order, newsletter and M-Pesa STK push relay for the storefront",
    version="1.0.0",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(orders_api, prefix="/api")
app.include_router(newsletter_api, prefix="/api")
app.include_router(payments_api, prefix="/api")


@app.get("/health", tags=["Health"])
async def health(settings: Settings = Depends(get_settings), store=Depends(get_payment_store)):
    return {
        "status": "ok",
        "integrations_mode": settings.integrations_mode or "auto",
        "mpesa_environment": settings.mpesa.environment.value,
        "payment_store": "connected" if store.ping() else "unavailable",
    }


logger.info("Store gateway started (allowed origins: %s)", ", ".join(settings.allowed_origins))
