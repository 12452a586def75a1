"""Inventory domain models."""
from dataclasses import dataclass

from src.wm_common.enums import InventoryPath


@dataclass(frozen=True)
class StockAdjustment:
    product_id: str
    delta: int        # signed: +restock / -consume
    new_stock: int
    path: InventoryPath


class StockProcedureUnavailable(Exception):
    """The store-side stock function does not exist in the target database."""
