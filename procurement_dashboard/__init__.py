"""Procurement dashboard core: spreadsheet-backed master data, MRP and AI analysis."""

__version__ = "1.0.0"
