"""
Configuration management for push streams.
"""

from dataclasses import dataclass, field
from typing import Optional

import psutil

from pushstream.scheduler import AsyncioScheduler, Scheduler

# Rough per-element cost used to size the prebuffer warning
ELEMENT_SIZE_ESTIMATE = 64


def default_warning_size(min_size: int = 10_000, max_size: int = 10_000_000) -> int:
    """Warn once buffered elements would take ~1% of available RAM."""
    available = psutil.virtual_memory().available
    size = int(available * 0.01 / ELEMENT_SIZE_ESTIMATE)
    return max(min_size, min(size, max_size))


@dataclass
class StreamConfig:
    """Global configuration for stream construction."""

    # Scheduling
    scheduler: Scheduler = field(default_factory=AsyncioScheduler)

    # Prebuffer growth
    min_warning_size: int = 10_000
    max_warning_size: int = 10_000_000
    prebuffer_warning_size: Optional[int] = None  # None: derive from available memory

    # Logging
    log_failed_awaitables: bool = True

    _instance: Optional['StreamConfig'] = None

    def __post_init__(self):
        """Derive the warning size within this instance's bounds."""
        if self.prebuffer_warning_size is None:
            self.recalculate_warning_size()

    @classmethod
    def get_instance(cls) -> 'StreamConfig':
        """Get singleton instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def set_defaults(cls, **kwargs) -> None:
        """Set default configuration values."""
        instance = cls.get_instance()
        for key, value in kwargs.items():
            if hasattr(instance, key):
                setattr(instance, key, value)

    def recalculate_warning_size(self) -> int:
        """Re-derive prebuffer_warning_size from current available memory."""
        self.prebuffer_warning_size = default_warning_size(
            self.min_warning_size, self.max_warning_size
        )
        return self.prebuffer_warning_size


# Global configuration instance
config = StreamConfig.get_instance()
