import random

from constants import USER_AGENTS


class UserAgentPolicy:
    """Rotates through one class of user agents ("desktop" or "mobile")."""

    def __init__(self, kind: str = "desktop", rng=None):
        if kind not in USER_AGENTS:
            raise ValueError(f"Unknown user agent policy: {kind}")
        self.kind = kind
        self.agents = USER_AGENTS[kind]
        self._rng = rng or random.Random()

    def next(self) -> str:
        return self._rng.choice(self.agents)
