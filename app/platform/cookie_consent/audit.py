"""
Consent audit log.

Every consent write is appended to the log selected by ``logging.driver``:
``database`` rows (ConsentLogEntry) or ``file`` JSON lines. Entries come
back oldest-first as plain dicts with the keys
category, value, timestamp, ip, action, user_agent, session_key.
"""
import json
import logging
import os
from pathlib import Path
from typing import Optional, Mapping, Any

from django.conf import settings
from django.utils import timezone

from .conf import get_config, get_setting
from .constants import LogDrivers
from .models import ConsentAction, ConsentLogEntry

logger = logging.getLogger(__name__)


class DatabaseConsentLogger:
    """Stores consent decisions as ConsentLogEntry rows."""

    def log(self, data: Mapping[str, Any]) -> None:
        ConsentLogEntry.objects.create(
            category=data["category"],
            granted=bool(data["value"]),
            action=data.get("action") or ConsentAction.SET,
            ip_address=data.get("ip") or None,
            user_agent=ConsentLogEntry.clip_user_agent(data.get("user_agent")),
            session_key=data.get("session_key") or "",
            metadata=dict(data.get("metadata") or {}),
        )

    def entries(self, limit: Optional[int] = None, category: Optional[str] = None) -> list:
        queryset = ConsentLogEntry.objects.all()
        if category:
            queryset = queryset.filter(category=category)
        if limit:
            # newest N, still returned oldest-first
            rows = list(queryset.order_by("-created_at")[:limit])
            rows.reverse()
        else:
            rows = list(queryset.order_by("created_at"))
        return [row.as_log_dict() for row in rows]


class FileConsentLogger:
    """Appends consent decisions to a JSON-lines file."""

    def __init__(self, path=None):
        if not path:
            base_dir = getattr(settings, "BASE_DIR", None) or os.getcwd()
            path = Path(base_dir) / "logs" / "cookie_consent.log"
        self.path = Path(path)

    def log(self, data: Mapping[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        line = json.dumps(dict(data), default=str)
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(line + "\n")

    def entries(self, limit: Optional[int] = None, category: Optional[str] = None) -> list:
        if not self.path.exists():
            return []
        entries = []
        with self.path.open("r", encoding="utf-8") as handle:
            for line in handle:
                line = line.strip()
                if not line:
                    continue
                try:
                    entry = json.loads(line)
                except ValueError:
                    logger.warning(f"Skipping unreadable consent log line in {self.path}")
                    continue
                if not isinstance(entry, dict):
                    continue
                if category and entry.get("category") != category:
                    continue
                entries.append(entry)
        if limit:
            entries = entries[-limit:]
        return entries


def get_consent_logger(config=None):
    config = config or get_config()
    driver = str(get_setting(config, "logging.driver", LogDrivers.DATABASE.value)).lower()
    if driver == LogDrivers.FILE.value:
        return FileConsentLogger(get_setting(config, "logging.path"))
    if driver != LogDrivers.DATABASE.value:
        logger.warning(f"Unknown consent log driver '{driver}', using database")
    return DatabaseConsentLogger()


def log_consent(data: Mapping[str, Any], config=None) -> None:
    """Record one consent decision unless logging is disabled."""
    config = config or get_config()
    if not get_setting(config, "logging.enabled", False):
        return
    payload = dict(data)
    payload.setdefault("timestamp", int(timezone.now().timestamp()))
    get_consent_logger(config).log(payload)


def get_consent_log(config=None, limit: Optional[int] = None, category: Optional[str] = None) -> list:
    """Retrieve consent log entries (for compliance audits)."""
    return get_consent_logger(config).entries(limit=limit, category=category)
