#------------------------------------------------------------
#                  intelligence_service.py
#     Writes, reads and checks the stargazer intelligence
#                        artifact.

import json
import os
import tempfile
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta
from ..config import STALE_DATA_MAX_AGE_DAYS
from ..models import StargazerIntelligence

REQUIRED_FIELDS = {
    "totalUniqueStargazers": int,
    "combinedReach": int,
    "topStargazers": list,
    "topCompanies": list,
    "byRepo": dict,
    "lastUpdated": str,
}

# This function does format epoch milliseconds as an ISO-8601 UTC string.
def format_timestamp(epoch_ms: int) -> str:
    moment = datetime.fromtimestamp(epoch_ms / 1000, tz=timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")

# This function does write the artifact through a temp file and rename.
# Readers never observe a partially written document.
def write_intelligence(intelligence: StargazerIntelligence, path: str) -> None:
    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)
    temp_path = None
    try:
        with tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", dir=directory, suffix=".tmp", delete=False
        ) as file_handle:
            temp_path = file_handle.name
            json.dump(intelligence.to_dict(), file_handle, indent=2, ensure_ascii=False)
            file_handle.write("\n")
        os.replace(temp_path, path)
    except (OSError, TypeError, ValueError):
        if temp_path and os.path.exists(temp_path):
            os.remove(temp_path)
        raise

def load_intelligence(path: str) -> Optional[Dict[str, Any]]:
    if not os.path.exists(path):
        return None
    try:
        with open(path, "r", encoding="utf-8") as file_handle:
            data = json.load(file_handle)
    except (OSError, ValueError):
        return None
    return data if is_valid_intelligence(data) else None

def is_valid_intelligence(data: Any) -> bool:
    if not isinstance(data, dict):
        return False
    for key, expected in REQUIRED_FIELDS.items():
        value = data.get(key)
        if expected is int and isinstance(value, bool):
            return False
        if not isinstance(value, expected):
            return False
    return True

def _parse_moment(value: str) -> datetime:
    moment = date_parser.isoparse(value)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment

# This function does check whether the artifact is older than max_age_days.
# Unparseable timestamps count as stale.
def is_data_stale(
    last_updated: str,
    max_age_days: float = STALE_DATA_MAX_AGE_DAYS,
    now: Optional[datetime] = None,
) -> bool:
    try:
        moment = _parse_moment(last_updated)
    except (ValueError, OverflowError):
        return True
    now = now or datetime.now(timezone.utc)
    return (now - moment).total_seconds() / 86400 > max_age_days

# This function does describe how long ago a timestamp was.
# It returns the largest non-zero unit, e.g. "3 days ago".
def describe_age(last_updated: str, now: Optional[datetime] = None) -> str:
    try:
        moment = _parse_moment(last_updated)
    except (ValueError, OverflowError):
        return "at an unknown time"
    now = now or datetime.now(timezone.utc)
    delta = relativedelta(now, moment)
    for unit in ("years", "months", "days", "hours", "minutes"):
        amount = getattr(delta, unit)
        if amount > 0:
            label = unit if amount != 1 else unit[:-1]
            return f"{amount} {label} ago"
    return "just now"

def format_reach(value: int) -> str:
    if value >= 1_000_000:
        return f"{value / 1_000_000:.1f}M"
    if value >= 1_000:
        return f"{value / 1_000:.{0 if value >= 10_000 else 1}f}K"
    return str(value)
