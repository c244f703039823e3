"""Market data module: symbol catalog and price collection."""

from crossarb.market.prices import PriceCollector
from crossarb.market.symbols import SymbolCatalog


__all__ = [
    "PriceCollector",
    "SymbolCatalog",
]
