"""
Fixed-length byte array types.

Every value that crosses the pool boundary has a fixed width on the wire:
view hints are one byte, EVM addresses twenty, digests and private scalars
thirty-two, compressed public keys thirty-three. Modelling each width as its
own `bytes` subclass lets pydantic reject a mis-sized value at the edge
instead of deep inside curve arithmetic.

Values render as 0x-prefixed hex wherever a model is dumped, matching what
JSON-RPC nodes and the JavaScript tooling emit.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic.annotated_handlers import GetCoreSchemaHandler
from pydantic_core import core_schema
from typing_extensions import Self


def _raw(value: Any) -> bytes:
    """
    Turn hex text, a bytes-like value or a sequence of octets into bytes.

    Integers are refused: `bytes(n)` would silently build `n` zero bytes.
    """
    match value:
        case bytes() | bytearray() | memoryview():
            return bytes(value)
        case str():
            return bytes.fromhex(value.removeprefix("0x"))
        case int():
            raise TypeError("byte arrays are not built from integers")
        case _:
            return bytes(bytearray(value))


def _as_hex(value: bytes) -> str:
    return "0x" + value.hex()


class BaseBytes(bytes):
    """
    A `bytes` value of one fixed width.

    Subclasses only declare `LENGTH`.
    """

    LENGTH: ClassVar[int]
    """Required number of bytes."""

    def __new__(cls, value: Any = b"") -> Self:
        """
        Raises:
            ValueError: If the value does not decode to exactly `LENGTH` bytes.
        """
        data = _raw(value)
        if len(data) != cls.LENGTH:
            raise ValueError(f"{cls.__name__} expects exactly {cls.LENGTH} bytes, got {len(data)}")
        return super().__new__(cls, data)

    @classmethod
    def zero(cls) -> Self:
        """All-zero value of this width."""
        return cls(bytes(cls.LENGTH))

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        """
        Accept an instance as is; build one from raw bytes or hex text otherwise.

        Strict models still take hex strings, since that is how addresses and
        keys arrive from JSON.
        """
        build = core_schema.no_info_plain_validator_function(cls)
        return core_schema.union_schema(
            [
                core_schema.is_instance_schema(cls),
                core_schema.chain_schema([core_schema.bytes_schema(), build]),
                core_schema.chain_schema([core_schema.str_schema(), build]),
            ],
            serialization=core_schema.plain_serializer_function_ser_schema(_as_hex),
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.hex()})"


class Bytes1(BaseBytes):
    """Fixed-size byte array of exactly 1 byte."""

    LENGTH = 1


class Bytes20(BaseBytes):
    """Fixed-size byte array of exactly 20 bytes (an EVM account address)."""

    LENGTH = 20


class Bytes32(BaseBytes):
    """Fixed-size byte array of exactly 32 bytes."""

    LENGTH = 32


class Bytes33(BaseBytes):
    """Fixed-size byte array of exactly 33 bytes (a compressed secp256k1 point)."""

    LENGTH = 33


class Bytes65(BaseBytes):
    """Fixed-size byte array of exactly 65 bytes (an uncompressed secp256k1 point)."""

    LENGTH = 65


ZERO_HASH: Bytes32 = Bytes32.zero()
"""The zero hash, a 32-byte array of zeros."""
