"""Storefront exception hierarchy."""


class StorefrontError(Exception):
    """Base exception for all storefront errors."""


class StoreError(StorefrontError):
    """The document store rejected or failed an operation."""

    def __init__(self, operation: str, collection: str, message: str):
        self.operation = operation
        self.collection = collection
        super().__init__(f"[{collection}] {operation} failed: {message}")


class DocumentNotFoundError(StorefrontError):
    """A document addressed by id does not exist."""

    def __init__(self, collection: str, doc_id: str):
        self.collection = collection
        self.doc_id = doc_id
        super().__init__(f"{collection}/{doc_id} not found")


class ConflictError(StorefrontError):
    """A uniqueness rule (slug, coupon code, pending invitation, email) was violated."""


class ValidationError(StorefrontError):
    """Input data failed a business rule."""


class InvitationError(StorefrontError):
    """An invitation cannot be accepted in its current state."""


class StorageError(StorefrontError):
    """Object storage upload or delete failed."""
