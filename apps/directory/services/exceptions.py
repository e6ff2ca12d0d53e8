"""Domain-specific exceptions for directory services."""


class DirectoryServiceError(Exception):
    """Base exception for directory services."""
    pass


class InvalidPartyKindError(DirectoryServiceError):
    """Raised for a party kind other than customer or supplier."""
    pass


class InvalidPartyNameError(DirectoryServiceError):
    """Raised when a party name is blank."""
    pass


class DuplicateProductError(DirectoryServiceError):
    """Raised when the product is already in the catalog."""
    pass
