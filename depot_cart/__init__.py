"""
Depot Cart Engine

Client-side cart reconciliation, subscription pricing and delivery-date
derivation for a depot-scoped storefront.
"""

__version__ = "1.0.0"
