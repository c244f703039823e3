"""
Cross-Venue Arbitrage Scanner.

An asynchronous service that compares last-trade prices of the pairs listed
on every configured crypto venue and reports the pairs whose prices diverge
beyond a percentage threshold.
"""

__version__ = "1.0.0"
__author__ = "Tim"
