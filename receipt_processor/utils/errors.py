class MalformedInputError(ValueError):
    """Raised when a receipt field cannot be parsed into the value scoring needs."""


class ReceiptNotFoundError(LookupError):
    """Raised when no stored receipt matches the requested ID."""

    def __init__(self, receiptId: str):
        super().__init__(f"No receipt found for ID: {receiptId}")
        self.receiptId = receiptId
