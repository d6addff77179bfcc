import os

from constants import (
    DEFAULT_MAX_WALK_PAGES,
    DEFAULT_REDIS_URL,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_USER_AGENT_POLICY,
    USER_AGENTS,
)

RATE_LIMIT_BACKENDS = ("memory", "redis")


class Config:
    def __init__(self, environ=None):
        env = os.environ if environ is None else environ
        self.request_timeout = float(env.get("REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT))
        self.rate_limit_backend = env.get("RATE_LIMIT_BACKEND", "memory").strip().lower()
        self.redis_url = env.get("REDIS_URL", DEFAULT_REDIS_URL)
        self.user_agent_policy = env.get("USER_AGENT_POLICY", DEFAULT_USER_AGENT_POLICY).strip().lower()
        self.max_walk_pages = int(env.get("MAX_WALK_PAGES", DEFAULT_MAX_WALK_PAGES))

        if self.request_timeout <= 0:
            raise ValueError("REQUEST_TIMEOUT must be > 0")
        if self.rate_limit_backend not in RATE_LIMIT_BACKENDS:
            raise ValueError(f"RATE_LIMIT_BACKEND must be one of {', '.join(RATE_LIMIT_BACKENDS)}")
        if self.user_agent_policy not in USER_AGENTS:
            raise ValueError(f"Unknown USER_AGENT_POLICY: {self.user_agent_policy}")
        if self.max_walk_pages < 1:
            raise ValueError("MAX_WALK_PAGES must be >= 1")


def get_config():
    return Config()
