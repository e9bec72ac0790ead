"""
HeightfieldKit/core/bias.py

16-bit bias transform between the unsigned sample domain and the signed
canonical domain. 0 -> -32768, 65535 -> 32767; order-preserving and exact.
"""
import numpy as np

INT16_MIN = int(np.iinfo(np.int16).min)
INT16_MAX = int(np.iinfo(np.int16).max)
OPAQUE_ALPHA = INT16_MAX


def to_signed(unsigned: np.ndarray) -> np.ndarray:
    """uint16 -> int16 (forward bias)."""
    unsigned = np.asarray(unsigned)
    if unsigned.dtype != np.uint16:
        raise TypeError(f"expected uint16 samples, got {unsigned.dtype}")
    return (unsigned.astype(np.int32) + INT16_MIN).astype(np.int16)


def to_unsigned(signed: np.ndarray) -> np.ndarray:
    """int16 -> uint16 (inverse bias)."""
    signed = np.asarray(signed)
    if signed.dtype != np.int16:
        raise TypeError(f"expected int16 samples, got {signed.dtype}")
    return (signed.astype(np.int32) - INT16_MIN).astype(np.uint16)
