"""
Stealth address engine.

Derives unlinkable one-time destinations from a recipient's meta-address,
recovers the matching private keys, and scans announcements for payments.
"""

from .address import (
    address_to_bytes,
    is_checksum_address,
    public_key_to_address,
    public_key_to_address_bytes,
    to_checksum_address,
)
from .codec import META_ADDRESS_PREFIX, decode_meta_address, encode_meta_address
from .containers import (
    Announcement,
    EphemeralKeyPair,
    KeyValidation,
    MetaAddress,
    MetaKeys,
    ScanMatch,
    StealthPayment,
)
from .engine import (
    check_view_hint,
    compute_tweak,
    derive_stealth_address,
    generate_ephemeral_key_pair,
    generate_meta_address,
    matches_stealth_address,
    recover_stealth_private_key,
    validate_public_key,
    view_hint_from_shared_secret,
)
from .scanner import AnnouncementSource, StealthScanner, examine_announcement

__all__ = [
    "Announcement",
    "AnnouncementSource",
    "EphemeralKeyPair",
    "KeyValidation",
    "META_ADDRESS_PREFIX",
    "MetaAddress",
    "MetaKeys",
    "ScanMatch",
    "StealthPayment",
    "StealthScanner",
    "address_to_bytes",
    "check_view_hint",
    "compute_tweak",
    "decode_meta_address",
    "derive_stealth_address",
    "encode_meta_address",
    "examine_announcement",
    "generate_ephemeral_key_pair",
    "generate_meta_address",
    "is_checksum_address",
    "matches_stealth_address",
    "public_key_to_address",
    "public_key_to_address_bytes",
    "recover_stealth_private_key",
    "to_checksum_address",
    "validate_public_key",
    "view_hint_from_shared_secret",
]
