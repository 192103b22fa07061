# Core modules

from .config import settings, get_settings, Settings
from .errors import CartEngineError, CatalogLookupError
from .state import ReconcilePhase, ReconcileState

__all__ = [
    "settings",
    "get_settings",
    "Settings",
    "CartEngineError",
    "CatalogLookupError",
    "ReconcilePhase",
    "ReconcileState",
]
