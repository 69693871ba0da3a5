class InventoryError(Exception):
    """Base error for failed inventory mutations."""

    status_code = 400
    code = "bad_request"

    def __init__(self, message: str, *, details: list[dict] | None = None):
        self.message = message
        self.details = details
        super().__init__(message)


class NotFoundError(InventoryError):
    status_code = 404
    code = "not_found"


class ConflictError(InventoryError):
    status_code = 409
    code = "conflict"
