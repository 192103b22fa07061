"""Engine assembly: store, catalog, reconciler and delivery context"""

import logging
from dataclasses import dataclass
from typing import Optional, Union

from .core.config import Settings, settings as default_settings
from .database.carts import CartStore
from .database.catalog import InMemoryCatalog
from .database.kv import InMemoryKeyValueStore, JsonFileKeyValueStore, KeyValueStore
from .services.catalog_client import CatalogClient
from .services.delivery import DeliveryService
from .services.reconciler import CartReconciler

logger = logging.getLogger(__name__)


@dataclass
class CartEngine:
    """Wired engine components for one shopper"""
    store: CartStore
    catalog: Union[CatalogClient, InMemoryCatalog]
    reconciler: CartReconciler
    delivery: DeliveryService

    async def close(self) -> None:
        if isinstance(self.catalog, CatalogClient):
            await self.catalog.close()


def build_engine(
    config: Optional[Settings] = None,
    storage: Optional[KeyValueStore] = None,
    catalog: Union[CatalogClient, InMemoryCatalog, None] = None,
) -> CartEngine:
    """Create an engine from settings; explicit collaborators take precedence"""
    config = config or default_settings

    if storage is None:
        if config.cart_storage_path:
            storage = JsonFileKeyValueStore(config.cart_storage_path)
        else:
            storage = InMemoryKeyValueStore()

    if catalog is None:
        if config.uses_remote_catalog:
            catalog = CatalogClient(
                config.catalog_base_url,
                timeout=config.catalog_timeout,
                max_retries=config.catalog_max_retries,
            )
            logger.info(f"Using catalog service at {config.catalog_base_url}")
        else:
            catalog = InMemoryCatalog()
            logger.info("No catalog URL configured - using in-memory catalog")

    store = CartStore(storage, storage_key=config.cart_storage_key)
    reconciler = CartReconciler(store, catalog, enforce_closing_qty=config.enforce_closing_qty)
    delivery = DeliveryService(catalog, reconciler)
    return CartEngine(store=store, catalog=catalog, reconciler=reconciler, delivery=delivery)
