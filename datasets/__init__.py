"""Dataset generators for QPerceptron tasks.

Provides the hypercube XOR (parity) datasets, their CSV persistence and the
encoders that map coordinates to unit quaternions.
"""

from .xor import (
    DataPoint,
    XorDataset,
    exact_xor,
    fuzzy_xor,
    encode_phase,
    encode_pure,
    ENCODERS,
)

__all__ = [
    "DataPoint",
    "XorDataset",
    "exact_xor",
    "fuzzy_xor",
    "encode_phase",
    "encode_pure",
    "ENCODERS",
]
