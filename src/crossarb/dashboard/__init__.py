"""HTTP interface for the arbitrage scanner."""

from crossarb.dashboard.server import create_app


__all__ = ["create_app"]
