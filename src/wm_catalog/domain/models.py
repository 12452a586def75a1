"""Catalog domain model: pure dataclass, no SQLAlchemy dependency."""
from dataclasses import dataclass


@dataclass
class Product:
    id: str
    name: str
    price: int            # won, per unit
    stock_quantity: int   # >= 0, mutated only by wm_inventory
    is_active: bool
    shipping_fee: int     # won, flat per order line
    seller_id: str
    moq: int = 1          # minimum order quantity per line
