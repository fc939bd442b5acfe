"""
Organizer authentication and guest-route rate limiting
"""

import logging
import secrets
import time
from collections import defaultdict, deque
from typing import Deque, Dict, Optional
from fastapi import HTTPException, Depends, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from seatplan.core.config import settings

logger = logging.getLogger(__name__)

# client ip -> timestamps of recent guest requests, oldest first
rate_limiter: Dict[str, Deque[float]] = defaultdict(deque)

RATE_WINDOW_SECONDS = 60.0

security = HTTPBearer()

def verify_admin_token(credentials: HTTPAuthorizationCredentials = Depends(security)):
    """Require the organizer bearer token"""
    if not secrets.compare_digest(credentials.credentials, settings.ADMIN_TOKEN):
        logger.warning("Rejected organizer request with an invalid token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid admin token"
        )
    return credentials.credentials

def rate_limit_check(client_ip: str, limit: Optional[int] = None, now: Optional[float] = None) -> bool:
    """Sliding-window limit on guest requests per client IP"""
    if limit is None:
        limit = settings.RATE_LIMIT_PER_MINUTE
    if now is None:
        now = time.time()

    recent = rate_limiter[client_ip]
    while recent and recent[0] <= now - RATE_WINDOW_SECONDS:
        recent.popleft()

    if len(recent) >= limit:
        return False

    recent.append(now)
    return True

def get_client_ip(request: Request) -> str:
    """Client IP, honouring reverse-proxy headers"""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip

    return request.client.host if request.client else "unknown"
