class CatalogError(Exception):
    """Base class for all catalog errors."""

    code = "catalog_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidArgument(CatalogError):
    """Malformed input, rejected before storage is touched."""

    code = "invalid_argument"


class NotFound(CatalogError):
    """The referenced entity does not exist."""

    code = "not_found"


class PreconditionFailed(CatalogError):
    """A business rule forbids the operation."""

    code = "precondition_failed"


class StorageError(CatalogError):
    """The database failed; the original exception is kept as ``__cause__``."""

    code = "storage_error"
