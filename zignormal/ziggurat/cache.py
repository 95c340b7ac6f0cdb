"""Process-wide cache of calibrated tables.

Tables are built on first request and kept for the life of the process. A lock
makes sure concurrent first requests build a table once and all see the same
object. A failed build stores nothing.
"""

import logging
import threading

from zignormal.ziggurat.calibration import DEFAULT_LAYERS, calibrate
from zignormal.ziggurat.table import ZigguratTable

logger = logging.getLogger(__name__)

_TABLES: dict[tuple[int, str], ZigguratTable] = {}
_TABLES_LOCK = threading.Lock()


def get_standard_table(n: int = DEFAULT_LAYERS, tail_area: str = "erfc") -> ZigguratTable:
    """Return the cached standard normal table for ``n`` layers.

    Arguments
    ---------
        n (int): Number of layers. Defaults to 256.
        tail_area (str): Name of the tail term used during calibration,
            "erfc" (default) or "gaussian".

    Returns
    -------
        ZigguratTable: The shared, immutable table.
    """
    key = (n, tail_area)
    table = _TABLES.get(key)
    if table is not None:
        return table
    with _TABLES_LOCK:
        table = _TABLES.get(key)
        if table is None:
            logger.info("Building %d-layer ziggurat table (tail=%s)", n, tail_area)
            table = calibrate(n=n, tail_area=tail_area)
            _TABLES[key] = table
        return table


def clear_table_cache() -> None:
    """Drop every cached table."""
    with _TABLES_LOCK:
        _TABLES.clear()
