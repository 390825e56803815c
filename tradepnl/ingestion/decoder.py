"""Byte-to-text decoding for brokerage exports.

Exports arrive either in the legacy Shift_JIS family (Windows code page 932)
or in UTF-8, with no declared encoding. Decoding is attempted under the
legacy codec first; UTF-8 wins only when it yields strictly fewer
replacement characters.
"""

import logging
from typing import NamedTuple

logger = logging.getLogger(__name__)

REPLACEMENT_CHAR = "\ufffd"
_BOM = "\ufeff"


class DecodedText(NamedTuple):
    text: str
    encoding: str


def _decode(data: bytes, encoding: str) -> str:
    return data.decode(encoding, errors="replace")


def decode_bytes(
    data: bytes,
    legacy_encoding: str = "cp932",
    fallback_encoding: str = "utf-8",
) -> DecodedText:
    """Decode raw export bytes, choosing between the legacy and UTF-8 codecs.

    Never raises for malformed input: undecodable bytes become U+FFFD, and an
    unknown legacy codec name falls back to decoding with ``fallback_encoding``.
    """
    try:
        legacy_text = _decode(data, legacy_encoding)
    except LookupError:
        logger.warning("Unknown codec %r, decoding as %s", legacy_encoding, fallback_encoding)
        return DecodedText(_decode(data, fallback_encoding).lstrip(_BOM), fallback_encoding)

    chosen = DecodedText(legacy_text, legacy_encoding)
    legacy_bad = legacy_text.count(REPLACEMENT_CHAR)
    if legacy_bad:
        fallback_text = _decode(data, fallback_encoding)
        fallback_bad = fallback_text.count(REPLACEMENT_CHAR)
        if fallback_bad < legacy_bad:
            chosen = DecodedText(fallback_text, fallback_encoding)
        logger.debug(
            "Replacement characters: %s=%d %s=%d, using %s",
            legacy_encoding, legacy_bad, fallback_encoding, fallback_bad, chosen.encoding,
        )

    return DecodedText(chosen.text.lstrip(_BOM), chosen.encoding)


def decode_text(data: bytes) -> str:
    """Decode with the default codecs and return only the text."""
    return decode_bytes(data).text
