"""
Fetcher package for the scraping engine.
Handles HTTP document fetching, per-source rate limiting and user-agent rotation.
"""

from .document import Document, DocumentFetcher
from .rate_limit import RateLimit, RateLimiter, RedisRateLimiter, build_rate_limiter
from .user_agents import UserAgentPolicy

__all__ = [
    "Document",
    "DocumentFetcher",
    "RateLimit",
    "RateLimiter",
    "RedisRateLimiter",
    "UserAgentPolicy",
    "build_rate_limiter",
]
