"""
Base service for business logic layer.
Services orchestrate business operations using repositories and the cache.
"""

from typing import Any, Callable, Optional
from abc import ABC
import logging

from sqlalchemy.orm import Session

from adapters.cache_adapter import SafeCache
from app.config import settings
from app.exceptions import ServiceValidationError


class BaseService(ABC):
    """
    Base service providing common functionality.
    All service classes should inherit from this class.
    """

    def __init__(self, db: Session, cache: SafeCache, logger_name: str):
        self.db = db
        self.cache = cache
        self.logger = logging.getLogger(logger_name)

    def log_info(self, message: str, **kwargs):
        """Log info message with structured data"""
        extra_data = " ".join([f"{k}={v}" for k, v in kwargs.items()])
        self.logger.info(f"{message} {extra_data}".strip())

    def log_warning(self, message: str, **kwargs):
        """Log warning message with structured data"""
        extra_data = " ".join([f"{k}={v}" for k, v in kwargs.items()])
        self.logger.warning(f"{message} {extra_data}".strip())

    def log_error(self, message: str, **kwargs):
        """Log error message with structured data"""
        extra_data = " ".join([f"{k}={v}" for k, v in kwargs.items()])
        self.logger.error(f"{message} {extra_data}".strip())

    def cached(self, key: str, ttl: int, loader: Callable[[], Optional[Any]]) -> Optional[Any]:
        """
        Read-through lookup.

        Returns the cached value for `key` when present, otherwise calls
        `loader` and stores its result for `ttl` seconds. A None result is
        returned but never stored.
        """
        hit = self.cache.get_json(key)
        if hit is not None:
            return hit
        value = loader()
        if value is not None:
            self.cache.set_json(key, value, ttl)
        return value


def validate_page(page: int, limit: int) -> None:
    """Reject out-of-range pagination before any store or cache access"""
    if page is None or page < 1:
        raise ServiceValidationError("page must be >= 1", details={"page": page})
    validate_limit(limit)


def validate_limit(limit: int) -> None:
    if limit is None or not 1 <= limit <= settings.max_page_size:
        raise ServiceValidationError(
            f"limit must be between 1 and {settings.max_page_size}",
            details={"limit": limit},
        )


def validate_offset(offset: int) -> None:
    if offset is None or offset < 0:
        raise ServiceValidationError("offset must be >= 0", details={"offset": offset})
