"""
Firestore client for the alternate storage backend
"""

from __future__ import annotations

import base64
import json
import logging
import os
from functools import lru_cache
from typing import Any

import firebase_admin
from firebase_admin import credentials, firestore

from seatplan.core.config import settings

logger = logging.getLogger(__name__)


def load_service_account(
    raw_json: str | None = None,
    b64_json: str | None = None,
    path: str | None = None,
) -> dict[str, Any] | None:
    """Service-account info from the first source that is set.

    Sources are tried in order: inline JSON, base64 JSON, then a file on disk.
    """
    if raw_json:
        return json.loads(raw_json)
    if b64_json:
        return json.loads(base64.b64decode(b64_json).decode("utf-8"))
    if path and os.path.exists(path):
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    return None


@lru_cache(maxsize=1)
def get_firestore_client():
    """Cached Firestore client, or None while the SQL backend is configured"""
    if not settings.USE_FIREBASE:
        return None

    if not firebase_admin._apps:
        info = load_service_account(
            settings.FIREBASE_CREDENTIALS_JSON,
            settings.FIREBASE_CREDENTIALS_B64,
            settings.FIREBASE_CREDENTIALS_FILE,
        )
        if not info:
            raise RuntimeError(
                "Firebase credentials not provided. Set FIREBASE_CREDENTIALS_FILE, "
                "FIREBASE_CREDENTIALS_JSON or FIREBASE_CREDENTIALS_B64"
            )
        firebase_admin.initialize_app(credentials.Certificate(info))
        logger.info(f"Firebase app initialized for project {info.get('project_id', '<unknown>')}")

    return firestore.client()
