"""Storefront API.

Catalog, category administration and order management backend for
the storefront web client.
"""

__version__ = "0.1.0"
