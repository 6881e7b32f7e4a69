from datetime import datetime, timezone
from typing import Any, Dict, Optional

import pandas as pd

from spa_booking.services.scheduling import parse_duration_minutes
from spa_booking.services.storage_service import JsonFileRepository


def load_bookings_frame(path: str, tz: str = "UTC") -> pd.DataFrame:
    """
    Reads the booking snapshot into a DataFrame sorted by start time.
    Adds `start` / `end` (timezone-aware, in `tz`) and `minutes` columns.
    """
    records = JsonFileRepository(path).load()
    df = pd.DataFrame(records)
    if df.empty:
        return df

    df["start"] = pd.to_datetime(df["datetime"], utc=True, errors="coerce").dt.tz_convert(tz)
    df["minutes"] = df["duration"].map(parse_duration_minutes)
    df["end"] = df["start"] + pd.to_timedelta(df["minutes"], unit="m")
    return df.sort_values("start").reset_index(drop=True)


def load_testimonials_frame(path: str) -> pd.DataFrame:
    df = pd.DataFrame(JsonFileRepository(path).load())
    if df.empty:
        return df
    return df.sort_values(["created_at", "id"], ascending=False).reset_index(drop=True)


def summarize(df: pd.DataFrame, now: Optional[datetime] = None) -> Dict[str, Any]:
    if df.empty:
        return {"total_bookings": 0, "services": 0, "booked_minutes": 0, "next_booking": None}

    now = now or datetime.now(timezone.utc)
    upcoming = df[df["start"] >= pd.Timestamp(now)]
    return {
        "total_bookings": len(df),
        "services": df["service"].nunique(),
        "booked_minutes": float(df["minutes"].sum()),
        "next_booking": upcoming["start"].min() if not upcoming.empty else None,
    }
