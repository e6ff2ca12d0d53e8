from django.conf import settings


DEFAULTS = {
    # Row-lock a party's outstanding orders for the whole allocation.
    'SERIALIZE_PARTY_PAYMENTS': False,
    'CURRENCY': 'PKR',
}


def ledger_setting(name):
    """Read a key from ``settings.LEDGER``, falling back to DEFAULTS."""
    return getattr(settings, 'LEDGER', {}).get(name, DEFAULTS[name])
