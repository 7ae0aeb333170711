"""
Soul hash codec.

A token is the profile's compact JSON, deflated with zlib and written in the
URL-safe base64 alphabet without padding, so it can travel as ?host=<token>.

Invite links from the first release carry lz-string tokens instead. Those are
still read, never written.
"""
import base64
import binascii
import dataclasses
import json
import logging
import re
import time
import zlib

from lzstring import LZString

from core.errors import DecodeFailure
from core.profile import SoulProfile, profile_from_dict

logger = logging.getLogger(__name__)

# Upper bound on inflated size; real profiles are well under 1 KB.
MAX_DECODED_BYTES = 64 * 1024

_TOKEN_RE = re.compile(r"[A-Za-z0-9_-]+")

# lz-string tokens have no checksum or size header; bound the input instead.
MAX_LEGACY_TOKEN_CHARS = 8 * 1024


def _now_ms() -> int:
    return int(time.time() * 1000)


def encode_soul(profile: SoulProfile, clock=None) -> str:
    """Stamp the profile with the current time and return its token."""
    timestamp = clock() if clock else _now_ms()
    stamped = dataclasses.replace(profile, timestamp=timestamp)

    json_text = json.dumps(stamped.to_dict(), ensure_ascii=False, separators=(",", ":"))
    compressed = zlib.compress(json_text.encode("utf-8"), 9)
    return base64.urlsafe_b64encode(compressed).decode("ascii").rstrip("=")


def _inflate(token: str) -> str:
    if not isinstance(token, str) or not _TOKEN_RE.fullmatch(token):
        raise DecodeFailure("not a url-safe token")

    padded = token + "=" * (-len(token) % 4)
    try:
        compressed = base64.b64decode(padded.encode("ascii"), altchars=b"-_", validate=True)
    except (binascii.Error, UnicodeEncodeError) as e:
        raise DecodeFailure(f"bad alphabet: {e}") from e

    try:
        inflater = zlib.decompressobj()
        raw = inflater.decompress(compressed, MAX_DECODED_BYTES)
        if inflater.unconsumed_tail or inflater.unused_data or not inflater.eof:
            raise DecodeFailure("truncated or oversized payload")
        return raw.decode("utf-8")
    except (zlib.error, UnicodeDecodeError) as e:
        raise DecodeFailure(f"decompression failed: {e}") from e


def _inflate_legacy(token: str) -> str:
    if len(token) > MAX_LEGACY_TOKEN_CHARS:
        raise DecodeFailure("legacy token too long")
    try:
        text = LZString().decompressFromEncodedURIComponent(token)
    except Exception as e:
        # any failure inside the decoder means an invalid token
        raise DecodeFailure(f"legacy decompression failed: {e!r}") from e
    if not text:
        raise DecodeFailure("legacy decompression produced nothing")
    return text


def _read_payload(token) -> str:
    try:
        return _inflate(token)
    except DecodeFailure as e:
        if not isinstance(token, str) or not token:
            raise
        logger.debug("[Codec] Not a zlib token (%s), trying lz-string", e.reason)
        return _inflate_legacy(token)


def decode_soul(token: str) -> SoulProfile | None:
    """
    Return the profile behind a token, or None for anything that is not a
    product of encode_soul (or of the first release's lz-string encoder).
    Never raises.
    """
    try:
        json_text = _read_payload(token)
        try:
            data = json.loads(json_text)
            return profile_from_dict(data)
        except (ValueError, TypeError, OverflowError, RecursionError) as e:
            raise DecodeFailure(str(e)) from e
    except DecodeFailure as e:
        logger.debug("[Codec] Rejected token: %s", e.reason)
        return None
