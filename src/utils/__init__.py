"""
Utility modules for the store gateway
"""
from .config_loader import get_settings, load_pricing_config, load_settings, PricingConfig, Settings

__all__ = [
    'get_settings',
    'load_settings',
    'load_pricing_config',
    'PricingConfig',
    'Settings',
]
