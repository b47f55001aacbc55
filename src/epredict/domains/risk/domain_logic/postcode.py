"""UK postcode validation and regularisation.

Pattern validation only: a postcode that passes is well formed, not
necessarily one that exists.
"""

from __future__ import annotations

import re

POSTCODE_INVALID = "postcode_invalid"

# Simple UK postcode shape, relaxed to allow any letters in the inward code
# (e.g. ZZ99 5VZ).
_POSTCODE_RE = re.compile(r"(?P<town>[A-Z]{1,2})(?P<district>[0-9R][0-9A-Z]?)(?P<street>[0-9][A-Z]{2})")
# Newport codes carry no numeric district.
_NEWPORT_RE = re.compile(r"(?P<town>NPT)(?P<street>[0-9][A-Z]{2})")

_OUTWARD_WIDTH = 4


def _join(outward: str, inward: str) -> str:
    # Outward code padded to four characters, always followed by a space.
    return (outward + " ").ljust(_OUTWARD_WIDTH) + inward


def validate_and_regularise_postcode(postcode: str) -> str:
    """Return the canonical form of *postcode*, or ``POSTCODE_INVALID``.

    Whitespace is removed and letters upper-cased before matching, so the
    result is stable under repeated application::

        >>> validate_and_regularise_postcode("sw1a1aa")
        'SW1A 1AA'
        >>> validate_and_regularise_postcode("M11AA")
        'M1  1AA'
        >>> validate_and_regularise_postcode("NPT1AA")
        'NPT 1AA'
    """
    compact = "".join(postcode.split()).upper()

    match = _POSTCODE_RE.fullmatch(compact)
    if match:
        return _join(match["town"] + match["district"], match["street"])

    match = _NEWPORT_RE.fullmatch(compact)
    if match:
        return _join(match["town"], match["street"])

    return POSTCODE_INVALID
