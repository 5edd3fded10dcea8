"""
                Reunion Meal Orders

A small FastAPI backend that collects meal orders for a gathering
and lists them back, stored in a single PostgreSQL table.

Version: 1.0.0
"""

__version__ = "1.0.0"
