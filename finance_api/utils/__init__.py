from .logging import configure_logging
from .timestamp import coerce_timestamp, parse_timestamp, utcnow

__all__ = ["configure_logging", "coerce_timestamp", "parse_timestamp", "utcnow"]
