from .helper import frame_to_records, round_2_decimals, utc_now_iso
from .rate_limiter import RateLimiter

__all__ = [
    "frame_to_records",
    "round_2_decimals",
    "utc_now_iso",
    "RateLimiter",
]
