"""
Cesta shopping-list engine.

The package turns planned meals into an aggregated ingredient checklist and manages the
resulting shopping lists as named groups with a create/rename/complete/delete lifecycle.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
