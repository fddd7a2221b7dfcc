from .catalog_parser import CatalogParser, parse_catalog

__all__ = ["CatalogParser", "parse_catalog"]
