"""Circular geometry helpers for angular positions"""

from .angles import (
    SIGN_WIDTH_DEG,
    abs_angle_diff,
    degree_in_sign,
    minimal_circular_span,
    minimal_signed_angle_diff,
    normalize,
    normalize360,
    sign_index,
)

__all__ = [
    "SIGN_WIDTH_DEG",
    "abs_angle_diff",
    "degree_in_sign",
    "minimal_circular_span",
    "minimal_signed_angle_diff",
    "normalize",
    "normalize360",
    "sign_index",
]
