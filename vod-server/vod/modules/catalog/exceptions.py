"""Catalog domain specific exceptions."""


class CatalogError(Exception):
    """Base class for catalog errors."""


class AssetNotFoundError(CatalogError):
    """Raised when an asset is missing, inactive, or no asset owns a storage key."""


class VariantConflictError(CatalogError):
    """Raised when an asset already carries a variant of the requested quality."""


class InvalidVariantError(CatalogError):
    """Raised when variant attributes fall outside the supported set."""
