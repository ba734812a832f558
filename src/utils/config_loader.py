"""
Configuration loader for the store gateway
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError
import logging

from src.integrations.contracts.interfaces import MpesaEnvironment

logger = logging.getLogger(__name__)

DEFAULT_ALLOWED_ORIGINS = [
    "http://localhost:5173",
    "https://www.ujananaujuzi.org",
    "https://ujana-na-ujuzi.vercel.app",
]

DEFAULT_PRICING_PATH = Path(__file__).parent.parent.parent / "config" / "pricing.yml"

_MPESA_BASE_URLS = {
    MpesaEnvironment.SANDBOX: "https://sandbox.safaricom.co.ke",
    MpesaEnvironment.PRODUCTION: "https://api.safaricom.co.ke",
}


class BrevoConfig(BaseModel):
    """Transactional email + contacts provider"""

    model_config = ConfigDict(frozen=True)

    api_key: str = ""
    base_url: str = "https://api.brevo.com/v3"
    from_email: str = ""
    from_name: str = "44 Bulldogs Store"
    admin_email: str = ""
    admin_name: str = "Store Admin"
    newsletter_list_id: Optional[int] = None

    @property
    def configured(self) -> bool:
        return bool(self.api_key)


class MpesaConfig(BaseModel):
    """STK push gateway credentials"""

    model_config = ConfigDict(frozen=True)

    consumer_key: str = ""
    consumer_secret: str = ""
    short_code: str = ""
    passkey: str = ""
    environment: MpesaEnvironment = MpesaEnvironment.SANDBOX
    callback_url: str = ""
    transaction_type: str = "CustomerPayBillOnline"
    account_reference: str = "440047"

    @property
    def base_url(self) -> str:
        return _MPESA_BASE_URLS[self.environment]

    @property
    def oauth_url(self) -> str:
        return f"{self.base_url}/oauth/v1/generate?grant_type=client_credentials"

    @property
    def stk_push_url(self) -> str:
        return f"{self.base_url}/mpesa/stkpush/v1/processrequest"

    @property
    def configured(self) -> bool:
        return bool(self.consumer_key and self.consumer_secret and self.short_code and self.passkey)


class Settings(BaseModel):
    """Process-wide settings. Built once and never mutated."""

    model_config = ConfigDict(frozen=True)

    brevo: BrevoConfig = Field(default_factory=BrevoConfig)
    mpesa: MpesaConfig = Field(default_factory=MpesaConfig)
    allowed_origins: List[str] = Field(default_factory=lambda: list(DEFAULT_ALLOWED_ORIGINS))
    http_timeout_seconds: float = Field(default=15.0, gt=0)
    newsletter_timeout_seconds: float = Field(default=10.0, gt=0)
    payment_callback_timeout_seconds: float = Field(default=300.0, gt=0)
    integrations_mode: str = ""
    redis_url: Optional[str] = None
    pricing_config_path: Optional[str] = None
    log_level: str = "INFO"


class PriceRule(BaseModel):
    keyword: str
    size: Optional[str] = None
    unit_price: int = Field(gt=0)


class PricingConfig(BaseModel):
    """Static price table"""

    currency: str = "KES"
    default_unit_price: int = Field(default=2000, gt=0)
    rules: List[PriceRule] = Field(
        default_factory=lambda: [
            PriceRule(keyword="wristband", size="small", unit_price=150),
            PriceRule(keyword="wristband", unit_price=200),
        ]
    )


def _split_csv(raw: Optional[str]) -> List[str]:
    return [item.strip() for item in (raw or "").split(",") if item.strip()]


def load_settings() -> Settings:
    """
    Build Settings from the process environment (after loading .env).

    Raises:
        ValidationError: If a value doesn't match the schema
    """
    load_dotenv()
    env = os.getenv

    try:
        settings = Settings(
            brevo=BrevoConfig(
                api_key=env("BREVO_API_KEY", ""),
                base_url=env("BREVO_API_URL", "https://api.brevo.com/v3").rstrip("/"),
                from_email=env("FROM_EMAIL", ""),
                from_name=env("FROM_NAME", "44 Bulldogs Store"),
                admin_email=env("ADMIN_EMAIL", ""),
                admin_name=env("ADMIN_NAME", "Store Admin"),
                newsletter_list_id=(env("BREVO_NEWSLETTER_LIST_ID") or "").strip() or None,
            ),
            mpesa=MpesaConfig(
                consumer_key=env("MPESA_CONSUMER_KEY", ""),
                consumer_secret=env("MPESA_CONSUMER_SECRET", ""),
                short_code=env("MPESA_SHORT_CODE", ""),
                passkey=env("MPESA_PASSKEY", ""),
                environment=env("MPESA_ENVIRONMENT", "sandbox").strip().lower(),
                callback_url=env("MPESA_CALLBACK_URL", ""),
                transaction_type=env("MPESA_TRANSACTION_TYPE", "CustomerPayBillOnline"),
                account_reference=env("MPESA_ACCOUNT_REFERENCE", "440047"),
            ),
            allowed_origins=_split_csv(env("ALLOWED_ORIGINS")) or list(DEFAULT_ALLOWED_ORIGINS),
            http_timeout_seconds=env("HTTP_TIMEOUT_SECONDS", "15"),
            newsletter_timeout_seconds=env("NEWSLETTER_TIMEOUT_SECONDS", "10"),
            payment_callback_timeout_seconds=env("PAYMENT_CALLBACK_TIMEOUT_SECONDS", "300"),
            integrations_mode=env("INTEGRATIONS_MODE", "").strip().lower(),
            redis_url=env("REDIS_URL") or None,
            pricing_config_path=env("PRICING_CONFIG_PATH") or None,
            log_level=env("LOG_LEVEL", "INFO").upper(),
        )
    except ValidationError as e:
        logger.error(f"Settings validation failed: {e}")
        raise
    return settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()


def load_pricing_config(config_path: Optional[Path] = None) -> PricingConfig:
    """
    Load and validate the price table from YAML

    Args:
        config_path: Path to config file. Defaults to config/pricing.yml

    Returns:
        Validated PricingConfig object; built-in defaults if the file is missing

    Raises:
        ValidationError: If config doesn't match schema
    """
    if config_path is None:
        config_path = DEFAULT_PRICING_PATH
    config_path = Path(config_path)

    if not config_path.exists():
        logger.warning(f"Pricing config not found at {config_path}; using built-in price table")
        return PricingConfig()

    with open(config_path, "r", encoding="utf-8") as f:
        config_data = yaml.safe_load(f) or {}

    try:
        config = PricingConfig(**config_data)
        logger.info(f"Successfully loaded pricing config from {config_path}")
        return config
    except ValidationError as e:
        logger.error(f"Pricing config validation failed: {e}")
        raise
