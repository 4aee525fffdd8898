"""
JSON price table provider.

WHAT: Item prices read from a local JSON file
WHY: Price data without depending on a remote market service
HOW: Lazy load into a dict keyed by normalized item name
"""

import asyncio
import json
import threading
from pathlib import Path
from typing import Any

from .types import PriceInfo, ProviderStatus, normalize_item_name
from ..utils.exceptions import PriceSourceError
from ..utils.logger import get_logger

logger = get_logger(__name__)


def _parse_price_record(name: str, raw: Any) -> PriceInfo:
    """
    Build PriceInfo from one table value.
    
    Accepted shapes:
    - 1500                                      -> min = max = average = 1500
    - {"min": 1200, "max": 1800, "average": 1500}
    - {"min": 1200}                             -> max defaults to min
    """
    if isinstance(raw, bool):
        raise ValueError("boolean is not a price")
    if isinstance(raw, int):
        if raw <= 0:
            raise ValueError(f"price must be positive, got {raw}")
        return PriceInfo(item_name=name, min_price=raw, max_price=raw, average_price=raw)
    if not isinstance(raw, dict):
        raise ValueError(f"expected int or object, got {type(raw).__name__}")
    
    min_price = raw.get("min")
    if isinstance(min_price, bool) or not isinstance(min_price, int) or min_price <= 0:
        raise ValueError(f"'min' must be a positive integer, got {min_price!r}")
    
    max_price = raw.get("max", min_price)
    average = raw.get("average")
    for label, value in (("max", max_price), ("average", average)):
        if value is not None and (isinstance(value, bool) or not isinstance(value, int) or value < 0):
            raise ValueError(f"'{label}' must be a non-negative integer, got {value!r}")
    
    return PriceInfo(
        item_name=name,
        min_price=min_price,
        max_price=max_price,
        average_price=average
    )


class PriceTableProvider:
    """Item data provider backed by a JSON price table."""
    
    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._table: dict[str, PriceInfo] | None = None
        self._lock = threading.Lock()
    
    def _load(self) -> dict[str, PriceInfo]:
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            raise PriceSourceError(f"Price table not found: {self.path}", source=str(self.path))
        except (OSError, json.JSONDecodeError) as e:
            raise PriceSourceError(f"Cannot read price table {self.path}: {e}", source=str(self.path))
        
        if not isinstance(raw, dict):
            raise PriceSourceError(
                f"Price table {self.path} must be a JSON object",
                source=str(self.path)
            )
        
        table = {}
        for name, record in raw.items():
            try:
                table[normalize_item_name(name)] = _parse_price_record(name, record)
            except ValueError as e:
                raise PriceSourceError(
                    f"Invalid price record for {name!r} in {self.path}: {e}",
                    source=str(self.path)
                )
        
        logger.info(f"Loaded {len(table)} prices from {self.path}")
        return table
    
    def _get_table(self) -> dict[str, PriceInfo]:
        with self._lock:
            if self._table is None:
                self._table = self._load()
            return self._table
    
    def reload(self) -> None:
        """Re-read the price table from disk."""
        with self._lock:
            self._table = self._load()
    
    async def _loaded_table(self) -> dict[str, PriceInfo]:
        # The first load reads and parses the file off the event loop
        table = self._table
        if table is None:
            table = await asyncio.to_thread(self._get_table)
        return table
    
    async def lookup(self, item_name: str) -> PriceInfo | None:
        """
        Look up an item.
        
        Raises:
            PriceSourceError: Table missing or malformed
        """
        table = await self._loaded_table()
        return table.get(normalize_item_name(item_name))
    
    async def ping(self) -> ProviderStatus:
        """Check that the table loads."""
        try:
            table = await self._loaded_table()
            return ProviderStatus(available=True, source=str(self.path), items=len(table))
        except PriceSourceError as e:
            logger.warning(f"Price table unavailable: {e.message}")
            return ProviderStatus(available=False, source=str(self.path), error=e.message)
