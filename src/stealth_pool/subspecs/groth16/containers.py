"""
Groth16 verifying keys and proofs.

Points are stored as affine integer coordinates in the layout snarkjs uses
in `verification_key.json` and `proof.json`:

- G1: `(x, y)`
- G2: `((x_c0, x_c1), (y_c0, y_c1))`, coefficients of `c0 + c1 * u`

Solidity verifiers take G2 coefficients in the opposite order. The calldata
helpers convert between the two.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Sequence, Tuple

from pydantic import Field, model_validator

from stealth_pool.types import StrictBaseModel

G1Point = Tuple[int, int]
"""Affine G1 point."""

G2Point = Tuple[Tuple[int, int], Tuple[int, int]]
"""Affine G2 point over F_p^2."""

CalldataG2 = Tuple[Tuple[int, int], Tuple[int, int]]
"""G2 point with coefficients swapped, as Solidity verifiers expect."""


def _parse_g1(raw: Sequence[Any]) -> G1Point:
    """Read `[x, y]` or projective `[x, y, "1"]` decimal strings."""
    if len(raw) == 3 and int(raw[2]) != 1:
        raise ValueError("G1 point is not normalized")
    if len(raw) not in (2, 3):
        raise ValueError(f"G1 point must have 2 or 3 coordinates, got {len(raw)}")
    return (int(raw[0]), int(raw[1]))


def _parse_g2(raw: Sequence[Sequence[Any]]) -> G2Point:
    """Read `[[x0, x1], [y0, y1]]` with an optional `["1", "0"]` z coordinate."""
    if len(raw) == 3 and (int(raw[2][0]), int(raw[2][1])) != (1, 0):
        raise ValueError("G2 point is not normalized")
    if len(raw) not in (2, 3):
        raise ValueError(f"G2 point must have 2 or 3 coordinates, got {len(raw)}")
    return (
        (int(raw[0][0]), int(raw[0][1])),
        (int(raw[1][0]), int(raw[1][1])),
    )


def _g1_json(point: G1Point) -> list[str]:
    return [str(point[0]), str(point[1]), "1"]


def _g2_json(point: G2Point) -> list[list[str]]:
    return [
        [str(point[0][0]), str(point[0][1])],
        [str(point[1][0]), str(point[1][1])],
        ["1", "0"],
    ]


class VerifyingKey(StrictBaseModel):
    """A Groth16 verifying key for a circuit with `n_public` public inputs."""

    alpha_1: G1Point
    beta_2: G2Point
    gamma_2: G2Point
    delta_2: G2Point
    ic: Tuple[G1Point, ...] = Field(min_length=1)
    """One point per public input, plus the constant term first."""

    @property
    def n_public(self) -> int:
        """Number of public inputs the key accepts."""
        return len(self.ic) - 1

    @classmethod
    def from_snarkjs(cls, data: dict[str, Any]) -> VerifyingKey:
        """
        Build a key from parsed `verification_key.json`.

        Raises:
            ValueError: If the protocol, curve or input count is inconsistent.
        """
        if data.get("protocol", "groth16") != "groth16":
            raise ValueError(f"Unsupported protocol {data.get('protocol')!r}")
        if data.get("curve", "bn128") not in ("bn128", "bn254"):
            raise ValueError(f"Unsupported curve {data.get('curve')!r}")

        key = cls(
            alpha_1=_parse_g1(data["vk_alpha_1"]),
            beta_2=_parse_g2(data["vk_beta_2"]),
            gamma_2=_parse_g2(data["vk_gamma_2"]),
            delta_2=_parse_g2(data["vk_delta_2"]),
            ic=tuple(_parse_g1(point) for point in data["IC"]),
        )
        if "nPublic" in data and int(data["nPublic"]) != key.n_public:
            raise ValueError(f"nPublic is {data['nPublic']} but IC has {len(key.ic)} points")
        return key

    @classmethod
    def load(cls, path: Path | str) -> VerifyingKey:
        """Read a snarkjs verifying key file."""
        return cls.from_snarkjs(json.loads(Path(path).read_text()))

    def to_snarkjs(self) -> dict[str, Any]:
        """The snarkjs JSON form of this key."""
        return {
            "protocol": "groth16",
            "curve": "bn128",
            "nPublic": self.n_public,
            "vk_alpha_1": _g1_json(self.alpha_1),
            "vk_beta_2": _g2_json(self.beta_2),
            "vk_gamma_2": _g2_json(self.gamma_2),
            "vk_delta_2": _g2_json(self.delta_2),
            "IC": [_g1_json(point) for point in self.ic],
        }


class Groth16Proof(StrictBaseModel):
    """A Groth16 proof `(A, B, C)`."""

    a: G1Point
    b: G2Point
    c: G1Point

    @classmethod
    def from_snarkjs(cls, data: dict[str, Any]) -> Groth16Proof:
        """Build a proof from parsed `proof.json`."""
        return cls(
            a=_parse_g1(data["pi_a"]),
            b=_parse_g2(data["pi_b"]),
            c=_parse_g1(data["pi_c"]),
        )

    def to_snarkjs(self) -> dict[str, Any]:
        """The snarkjs JSON form of this proof."""
        return {
            "pi_a": _g1_json(self.a),
            "pi_b": _g2_json(self.b),
            "pi_c": _g1_json(self.c),
            "protocol": "groth16",
            "curve": "bn128",
        }

    @classmethod
    def from_calldata(
        cls, a: Sequence[int], b: Sequence[Sequence[int]], c: Sequence[int]
    ) -> Groth16Proof:
        """Build a proof from Solidity verifier arguments `(a, b, c)`."""
        return cls(
            a=(int(a[0]), int(a[1])),
            b=((int(b[0][1]), int(b[0][0])), (int(b[1][1]), int(b[1][0]))),
            c=(int(c[0]), int(c[1])),
        )

    def to_calldata(self) -> Tuple[G1Point, CalldataG2, G1Point]:
        """Solidity verifier arguments `(a, b, c)`."""
        (x0, x1), (y0, y1) = self.b
        return self.a, ((x1, x0), (y1, y0)), self.c


class CircuitInputs(StrictBaseModel):
    """Public inputs of the withdrawal circuit, in circuit order."""

    root: int
    nullifier_hash: int
    ext_data_hash: int

    @model_validator(mode="after")
    def check_non_negative(self) -> CircuitInputs:
        """Inputs are unsigned."""
        if min(self.root, self.nullifier_hash, self.ext_data_hash) < 0:
            raise ValueError("public inputs must be non-negative")
        return self

    def as_list(self) -> list[int]:
        """Inputs in the order the verifying key's IC points expect."""
        return [self.root, self.nullifier_hash, self.ext_data_hash]
