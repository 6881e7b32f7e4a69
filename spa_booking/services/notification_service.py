from datetime import datetime, tzinfo
from typing import Any, Dict, Optional, Tuple

import requests

from spa_booking.core.config import Settings
from spa_booking.core.config_loader import load_business_config, get_notification_config, get_alert_defaults
from spa_booking.core.errors import NotificationError
from spa_booking.core.logger import logger
from spa_booking.models.booking_models import Booking


def format_date_and_time(value: str, tz: tzinfo) -> Tuple[str, str]:
    """
    Splits a stored timestamp into ('YYYY-MM-DD', 'hh:mm AM/PM') in the business timezone.
    """
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00")).astimezone(tz)
    except (ValueError, AttributeError):
        return "Invalid date", ""
    return dt.strftime("%Y-%m-%d"), dt.strftime("%I:%M %p")


def _or_default(value: Optional[str], defaults: Dict[str, str], key: str) -> str:
    return value or defaults.get(key, "")


def format_booking_alert(booking: Booking, defaults: Dict[str, str], tz: tzinfo) -> str:
    date_str, time_str = format_date_and_time(booking.start_time, tz)
    return f"""
✅ New Booking

Customer: {_or_default(booking.gender, defaults, 'gender')}
Telegram: {booking.phone}
Service: {booking.service}
Duration: {booking.duration}
Requested Therapist: {_or_default(booking.requested_therapist, defaults, 'requested_therapist')}
Price: {booking.price}
Date: *{date_str}*
Arrival Time: *{time_str}*

Remarks:
1. Aroma Oil: {_or_default(booking.aroma_oil, defaults, 'aroma_oil')}
2. Pressure: {_or_default(booking.pressure, defaults, 'pressure')}
3. Body area to focus: {_or_default(booking.focus_area, defaults, 'focus_area')}
4. Body area to avoid: {_or_default(booking.avoid_area, defaults, 'avoid_area')}
"""


def format_cancellation_alert(booking: Booking, defaults: Dict[str, str], tz: tzinfo) -> str:
    date_str, time_str = format_date_and_time(booking.start_time, tz)
    return f"""
❌ *Booking Canceled*

Customer: {_or_default(booking.gender, defaults, 'cancel_gender')}
Phone: {booking.phone}
Service: {booking.service}
Date: *{date_str}*
Time: *{time_str}*

⚠️ This booking has been canceled.
"""


class TelegramNotifier:
    """
    Sends booking alerts to a Telegram chat through the Bot API.
    The public send_* methods never raise: failures are logged and reported as False.
    """

    def __init__(self, bot_token: str, chat_id: str, tz: tzinfo,
                 api_url: str = "https://api.telegram.org", timeout: float = 10.0,
                 enabled: bool = True, defaults: Optional[Dict[str, str]] = None):
        self.bot_token = bot_token
        self.chat_id = chat_id
        self.tz = tz
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.enabled = enabled
        self.defaults = defaults or {}

    @property
    def configured(self) -> bool:
        return bool(self.bot_token and self.chat_id)

    def send_booking_alert(self, booking: Booking) -> bool:
        return self._send(format_booking_alert(booking, self.defaults, self.tz), "booking")

    def send_cancellation_alert(self, booking: Booking) -> bool:
        return self._send(format_cancellation_alert(booking, self.defaults, self.tz), "cancellation")

    def _send(self, text: str, kind: str) -> bool:
        if not self.enabled:
            logger.info(f"ℹ️ Telegram alerts are disabled in config, skipping {kind} alert.")
            return False

        if not self.configured:
            logger.warning(f"⚠️ TELEGRAM_BOT_TOKEN or TELEGRAM_CHAT_ID missing, skipping {kind} alert.")
            return False

        try:
            self._post_message(text)
        except NotificationError as e:
            logger.error(f"❌ Failed to send Telegram {kind} alert: {e.message}")
            return False

        logger.info(f"✅ Telegram {kind} alert sent")
        return True

    def _post_message(self, text: str) -> Dict[str, Any]:
        url = f"{self.api_url}/bot{self.bot_token}/sendMessage"
        payload = {
            "chat_id": self.chat_id,
            "text": text,
            "parse_mode": "Markdown",
        }
        try:
            response = requests.post(url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise NotificationError(str(e)) from e

        if response.status_code != 200:
            raise NotificationError(f"Telegram API error {response.status_code}: {response.text}")
        return response.json()


def build_notifier(settings: Settings, tz: tzinfo) -> TelegramNotifier:
    config = load_business_config(settings.BUSINESS_CONFIG_PATH)
    notifications = get_notification_config(config)
    return TelegramNotifier(
        bot_token=settings.TELEGRAM_BOT_TOKEN,
        chat_id=settings.TELEGRAM_CHAT_ID,
        tz=tz,
        api_url=settings.TELEGRAM_API_URL,
        timeout=settings.NOTIFICATION_TIMEOUT,
        enabled=notifications.get("telegram_enabled", True),
        defaults=get_alert_defaults(config),
    )
