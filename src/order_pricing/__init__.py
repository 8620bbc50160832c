"""
Order Pricing Package

Pricing and cart computation engine for photography service orders.
Resolves bundle prices (fixed, per-area, tiered), aggregates carts into
checkout totals, and splits invoices between agent and brokerage.
"""

__version__ = "1.0.0"
