"""Domain errors shared by the stores, the aggregator and the HTTP layer."""


class CurationError(Exception):
    """Base class for errors raised by the curation core."""

    kind = "curation_error"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidCategoryError(CurationError):
    """Category is not configured for the store."""

    kind = "invalid_category"
    status_code = 400

    def __init__(self, category: str, store_id: str):
        super().__init__(f"Category '{category}' is not configured for store '{store_id}'")
        self.category = category
        self.store_id = store_id


class InvalidEventError(CurationError):
    """Tracking event name is not recognised."""

    kind = "invalid_event"
    status_code = 400

    def __init__(self, event: str):
        super().__init__(f"Invalid event '{event}'")
        self.event = event


class UnknownStoreError(CurationError):
    kind = "unknown_store"
    status_code = 400

    def __init__(self, store_id: str):
        super().__init__(f"Unknown store '{store_id}'")
        self.store_id = store_id


class ResolutionFailure(CurationError):
    """A product handle could not be resolved through the catalog API."""

    kind = "resolution_failure"
    status_code = 502

    def __init__(self, handle: str, reason: str):
        super().__init__(f"Could not resolve product '{handle}': {reason}")
        self.handle = handle
        self.reason = reason


class BackingStoreUnavailable(CurationError):
    """The key-value store could not be reached or rejected the command."""

    kind = "backing_store_unavailable"
    status_code = 503


class ProductCatalogUnavailable(CurationError):
    """The upstream product catalog API failed while browsing products."""

    kind = "product_catalog_unavailable"
    status_code = 502
