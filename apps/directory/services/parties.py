"""Customer and supplier directory."""

import logging

from django.db import IntegrityError, transaction

from ..models import PARTY_MODELS
from .exceptions import InvalidPartyKindError, InvalidPartyNameError

logger = logging.getLogger(__name__)

SEARCH_LIMIT = 10


def get_party_model(kind):
    try:
        return PARTY_MODELS[kind]
    except KeyError:
        raise InvalidPartyKindError(f"Invalid party kind: {kind!r}")


def get_or_create_party(*, kind: str, name: str, **contact):
    """
    Return the directory entry for ``name``, creating it if missing.

    Existing entries are returned untouched; ``contact`` (phone, email,
    address) is only used when creating.

    Args:
        kind: 'customer' or 'supplier'
        name: Party name, trimmed before lookup

    Returns:
        Tuple of (party, created)

    Raises:
        InvalidPartyKindError: If kind is unknown
        InvalidPartyNameError: If name is blank
    """
    model = get_party_model(kind)
    name = (name or '').strip()
    if not name:
        raise InvalidPartyNameError("Name is required")

    defaults = {k: v for k, v in contact.items() if v is not None}
    try:
        with transaction.atomic():
            party, created = model.objects.get_or_create(name=name, defaults=defaults)
    except IntegrityError:
        # Created concurrently between the lookup and the insert
        party, created = model.objects.get(name=name), False

    if created:
        logger.info("Party added to directory", extra={"kind": kind, "party_name": name})
    return party, created


def search_parties(*, kind: str, query: str):
    """
    Case-insensitive substring search on party names.

    Returns at most ``SEARCH_LIMIT`` parties ordered by name. A blank query
    returns nothing.
    """
    model = get_party_model(kind)
    query = (query or '').strip()
    if not query:
        return model.objects.none()
    return model.objects.filter(name__icontains=query).order_by('name')[:SEARCH_LIMIT]


def list_parties(*, kind: str):
    return get_party_model(kind).objects.order_by('name')
