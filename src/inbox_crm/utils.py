"""
Identifier helpers for the inbox CRM.

Records created at runtime get UUIDv7 ids (time-sortable), prefixed by
record kind so a contact id can never be mistaken for a deal id.
fastuuid.UUID is a Rust-backed type that is NOT isinstance-compatible with
uuid.UUID, so uuid7() roundtrips through the string representation.
"""

import fastuuid
from uuid import UUID

CONTACT_ID_PREFIX = 'c-'
DEAL_ID_PREFIX = 'd-'


def uuid7() -> UUID:
    """Generate a UUIDv7 (time-sortable) as a stdlib uuid.UUID."""
    return UUID(str(fastuuid.uuid7()))


def new_contact_id() -> str:
    return f'{CONTACT_ID_PREFIX}{uuid7()}'


def new_deal_id() -> str:
    return f'{DEAL_ID_PREFIX}{uuid7()}'
