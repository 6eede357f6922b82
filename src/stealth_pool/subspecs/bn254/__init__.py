"""Specifications for the BN254 scalar field."""

from .field import (
    R_BITS,
    SNARK_SCALAR_FIELD,
    FieldElement,
    Fr,
    is_field_element,
    mod_field,
)

__all__ = [
    "SNARK_SCALAR_FIELD",
    "R_BITS",
    "FieldElement",
    "Fr",
    "is_field_element",
    "mod_field",
]
