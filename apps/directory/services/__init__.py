"""Services for the party directory and product catalog."""

from .exceptions import (
    DirectoryServiceError,
    InvalidPartyKindError,
    InvalidPartyNameError,
    DuplicateProductError,
)
from .parties import (
    get_party_model,
    get_or_create_party,
    search_parties,
    list_parties,
    SEARCH_LIMIT,
)
from .products import create_product

__all__ = [
    # Exceptions
    'DirectoryServiceError',
    'InvalidPartyKindError',
    'InvalidPartyNameError',
    'DuplicateProductError',
    # Parties
    'get_party_model',
    'get_or_create_party',
    'search_parties',
    'list_parties',
    'SEARCH_LIMIT',
    # Products
    'create_product',
]
