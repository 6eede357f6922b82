"""Core definition of the BN254 scalar field Fr."""

from typing import Annotated, Any, Self

from pydantic import BeforeValidator, Field, PlainSerializer, field_validator

from stealth_pool.types import StrictBaseModel

# =================================================================
# Field Constants
#
# This is the order of the BN254 (alt_bn128) G1 group, i.e. the field that
# Groth16 circuits compiled with circom operate over. Every public input
# of a withdrawal proof and every Merkle tree node lives in this field.
# =================================================================

SNARK_SCALAR_FIELD: int = (
    21888242871839275222246405745257275088548364400416034343698204186575808495617
)
"""The BN254 scalar field modulus r."""

R_BITS: int = 254
"""The number of bits in the modulus r."""


def is_field_element(value: int) -> bool:
    """Return True when `value` is a canonical element of Fr, i.e. in [0, r)."""
    return 0 <= value < SNARK_SCALAR_FIELD


def mod_field(value: int) -> int:
    """Reduce an arbitrary integer into [0, r)."""
    return value % SNARK_SCALAR_FIELD


# =================================================================
# Scalar Field Fr
#
# All arithmetic is performed modulo r.
# =================================================================


class Fr(StrictBaseModel):
    """An element in the BN254 scalar field F_r."""

    value: int = Field(
        ge=0, lt=SNARK_SCALAR_FIELD, description="Field element value in the range [0, r)"
    )

    @field_validator("value", mode="before")
    @classmethod
    def reduce_modulo_r(cls, v: int) -> int:
        """Reduces an integer input modulo r before validation."""
        return v % SNARK_SCALAR_FIELD

    def __add__(self, other: Self) -> Self:
        """Field addition."""
        return self.__class__(value=self.value + other.value)

    def __sub__(self, other: Self) -> Self:
        """Field subtraction."""
        return self.__class__(value=self.value - other.value)

    def __neg__(self) -> Self:
        """Field negation."""
        return self.__class__(value=-self.value)

    def __mul__(self, other: Self) -> Self:
        """Field multiplication."""
        return self.__class__(value=self.value * other.value)

    def __pow__(self, exponent: int) -> Self:
        """Field exponentiation."""
        return self.__class__(value=pow(self.value, exponent, SNARK_SCALAR_FIELD))

    def __int__(self) -> int:
        """Return the canonical integer representative."""
        return self.value

    @classmethod
    def zero(cls) -> Self:
        """The additive identity."""
        return cls(value=0)


# =================================================================
# Decimal string form
#
# Circuit inputs, persisted notes and JSON tooling carry field elements as
# decimal strings, since JavaScript numbers cannot hold 254-bit values.
# =================================================================


def _parse_decimal(value: Any) -> Any:
    if isinstance(value, str):
        return int(value, 10)
    return value


FieldElement = Annotated[
    int,
    BeforeValidator(_parse_decimal),
    Field(ge=0, lt=SNARK_SCALAR_FIELD),
    PlainSerializer(str, return_type=str, when_used="json"),
]
"""An integer in [0, r) that serializes to a decimal string in JSON."""
