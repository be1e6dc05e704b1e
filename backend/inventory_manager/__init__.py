"""Droguerie inventory manager: product/category data access across MySQL, JSON files and offline storage."""

__version__ = "0.1.0"
