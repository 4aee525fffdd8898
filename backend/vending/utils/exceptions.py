"""
Domain exceptions for the vending pipeline.

WHAT: Exceptions raised by parsing, planning, editing and persisting offers
WHY: Every failure is scoped to one operation and carries a stable error code
HOW: Exception classes with code, message and details (mapped to HTTP by middleware)
"""

from typing import Optional, Any


class VendingException(Exception):
    """Base class for vending exceptions."""
    
    def __init__(self, message: str, code: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details


class MalformedCartLineError(VendingException):
    """Raised when a cart block line is not `<index> <name tokens> <count>`."""
    
    def __init__(self, line: str, line_number: int, reason: str):
        super().__init__(
            message=f"Malformed cart line {line_number}: {reason}: {line!r}",
            code="MALFORMED_CART_LINE",
            details={"line": line, "line_number": line_number, "reason": reason}
        )
        self.line = line
        self.line_number = line_number


class IndexOutOfRangeError(VendingException):
    """Raised when an edit targets an entry position that does not exist."""
    
    def __init__(self, index: int, size: int):
        super().__init__(
            message=f"Entry index {index} out of range for offer with {size} entries",
            code="INDEX_OUT_OF_RANGE",
            details={"index": index, "size": size}
        )


class InvalidPriceError(VendingException):
    """Raised when a price is not a strictly positive integer."""
    
    def __init__(self, price: Any):
        super().__init__(
            message=f"Price must be a positive integer, got {price!r}",
            code="INVALID_PRICE",
            details={"price": price}
        )


class InvalidCountError(VendingException):
    """Raised when a count is not a non-negative integer."""
    
    def __init__(self, count: Any):
        super().__init__(
            message=f"Count must be a non-negative integer, got {count!r}",
            code="INVALID_COUNT",
            details={"count": count}
        )


class OfferNotFoundError(VendingException):
    """Raised when an offer id is not known to the store."""
    
    def __init__(self, offer_id: str):
        super().__init__(
            message=f"Offer not found: {offer_id}",
            code="OFFER_NOT_FOUND",
            details={"offer_id": offer_id}
        )


class DuplicateOfferError(VendingException):
    """Raised when an offer id is stored twice."""
    
    def __init__(self, offer_id: str):
        super().__init__(
            message=f"Offer id already used: {offer_id}",
            code="DUPLICATE_OFFER",
            details={"offer_id": offer_id}
        )


class PersistenceError(VendingException):
    """Raised when the shop config cannot be written or read."""
    
    def __init__(self, path: str, reason: str):
        super().__init__(
            message=f"Shop config I/O failed for {path}: {reason}",
            code="PERSISTENCE_ERROR",
            details={"path": path, "reason": reason}
        )


class ShopConfigNotFoundError(VendingException):
    """Raised when no shop config has been written yet."""
    
    def __init__(self, path: str):
        super().__init__(
            message=f"No shop config at {path}; confirm an offer first",
            code="SHOP_CONFIG_NOT_FOUND",
            details={"path": path}
        )


class ShopConfigFormatError(VendingException):
    """Raised when a shop config text cannot be parsed back into entries."""
    
    def __init__(self, line: str, line_number: int):
        super().__init__(
            message=f"Malformed shop config line {line_number}: {line!r}",
            code="SHOP_CONFIG_FORMAT_ERROR",
            details={"line": line, "line_number": line_number}
        )


class PriceSourceError(VendingException):
    """Raised when a price source cannot answer a lookup."""
    
    def __init__(self, message: str, source: str):
        super().__init__(
            message=message,
            code="PRICE_SOURCE_ERROR",
            details={"source": source}
        )


class BotProcessError(VendingException):
    """Raised when the OpenKore process cannot be started."""
    
    def __init__(self, message: str, command: str):
        super().__init__(
            message=message,
            code="BOT_PROCESS_ERROR",
            details={"command": command}
        )
