import json
import os
from typing import Dict, Any

from spa_booking.core.logger import logger

def load_business_config(path: str) -> Dict[str, Any]:
    """
    Loads business configuration from JSON file.
    Raises FileNotFoundError if config is missing, ValueError if it is not valid JSON.
    Returns: Dict containing config.
    """
    if not os.path.exists(path):
        logger.critical(f"❌ Business config '{path}' not found! The service cannot start.")
        raise FileNotFoundError(f"Configuration file not found at {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            config = json.load(f)
    except json.JSONDecodeError as e:
        logger.critical(f"❌ Failed to parse business config JSON: {e}")
        raise ValueError(f"Invalid JSON in config file: {e}")

    if not isinstance(config, dict):
        raise ValueError(f"Business config at {path} must be a JSON object")

    logger.info(f"✅ Business config loaded for: {config.get('business_name', 'Unknown')}")
    return config

def get_notification_config(config: Dict[str, Any]) -> Dict[str, Any]:
    return config.get("notifications", {})

def get_alert_defaults(config: Dict[str, Any]) -> Dict[str, str]:
    """
    Fallback texts used when an optional booking field is empty, e.g. {'pressure': 'Medium'}.
    Only the alert formatter reads these; stored bookings keep what the client sent.
    """
    return get_notification_config(config).get("defaults", {})
