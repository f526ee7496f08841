import math
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Any

import numpy as np
import pandas as pd


def _json_safe(value: Any) -> Any:
    if isinstance(value, (np.integer, np.floating, np.bool_)):
        value = value.item()
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, (pd.Timestamp, np.datetime64)):
        return pd.Timestamp(value).isoformat()
    if isinstance(value, np.ndarray):
        return [_json_safe(v) for v in value.tolist()]
    return value


def frame_to_records(df: pd.DataFrame) -> list[dict]:
    """Rows of a frame as plain dicts. NaN/inf become None, timestamps ISO strings."""
    return [
        {key: _json_safe(value) for key, value in row.items()}
        for row in df.to_dict(orient="records")
    ]


def round_2_decimals(x):
    if x is None:
        return None
    return float(Decimal(str(x)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()
