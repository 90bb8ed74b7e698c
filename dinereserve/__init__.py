"""DineReserve: restaurant discovery and table booking backend."""

__version__ = "0.1.0"
