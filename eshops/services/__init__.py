# Services Module
from .catalog import CatalogProduct, Connectivity, EShopsClient

__all__ = ["CatalogProduct", "Connectivity", "EShopsClient"]
