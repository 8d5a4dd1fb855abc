from dataclasses import dataclass, asdict
from enum import Enum, auto
from typing import Optional


class LoadOutcome(Enum):
    """Result of one fetch attempt, as reported by the fetcher."""
    SUCCESS = auto()
    FAILURE = auto()


class VisualState(Enum):
    """What the widget should currently present."""
    LOADING = auto()        # Initial attempt in flight
    RETRY_PENDING = auto()  # Retry scheduled or in flight
    FALLBACK = auto()       # No resource, or retries exhausted
    OFFLINE = auto()        # Disconnected with connectivity gating on
    SUCCESS = auto()        # Image loaded


@dataclass(frozen=True)
class LoadRequest:
    """Identifies one logical image-load attempt."""
    resource_key: Optional[str]
    attempt_suffix: int = 0

    @property
    def cache_key(self) -> Optional[str]:
        """Key the fetcher caches by; retries get a distinct key."""
        if self.attempt_suffix == 0:
            return self.resource_key
        return f"{self.resource_key}_retry_{self.attempt_suffix}"

    def to_dict(self):
        return asdict(self)


@dataclass
class RetryState:
    """Mutable retry state for the currently bound resource."""
    resource_key: Optional[str] = None
    retry_count: int = 0
    max_retries: int = 3
    is_connected: bool = True
    connectivity_enabled: bool = True

    @property
    def has_resource(self) -> bool:
        return bool(self.resource_key)

    @property
    def exhausted(self) -> bool:
        return self.retry_count >= self.max_retries

    @property
    def offline_gated(self) -> bool:
        return self.connectivity_enabled and not self.is_connected


@dataclass(frozen=True)
class VisualSnapshot:
    """Visual state plus the numbers the retry indicator shows."""
    state: VisualState
    attempt: int = 0         # Retry being waited on or in flight
    max_retries: int = 0
    in_flight: bool = False  # A load request is outstanding

    @property
    def retry_label(self) -> str:
        return f"Retry {self.attempt}/{self.max_retries}"

    def to_dict(self):
        data = asdict(self)
        data["state"] = self.state.name
        return data
