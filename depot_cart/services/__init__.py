# Engine services

from .catalog_client import CatalogClient, VariantCatalog, DepotResolver
from .reconciler import CartReconciler, ValidationSummary
from .delivery import DeliveryService
from .checkout import checkout_summary
from .schedule import resolve_delivery_dates
from . import pricing

__all__ = [
    "CatalogClient",
    "VariantCatalog",
    "DepotResolver",
    "CartReconciler",
    "ValidationSummary",
    "DeliveryService",
    "checkout_summary",
    "resolve_delivery_dates",
    "pricing",
]
