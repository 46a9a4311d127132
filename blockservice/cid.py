"""
CID (Content Identifier) helpers.

CIDs are plain ``bytes`` everywhere in this package. The routing core treats
them as opaque keys; these helpers exist for the reference block stores and
exchange, and for callers that need to build blocks from raw data.

Supported layouts:

- CIDv0: a bare sha2-256 multihash, ``<0x12><0x20><digest>``
- CIDv1: ``<0x01><codec><multihash>``, with a single-byte codec
"""

import logging

import base58
import multihash

from .errors import InvalidCIDError

logger = logging.getLogger(__name__)

CID_V0 = 0
CID_V1 = 1

# Multicodec codes
CODEC_DAG_PB = 0x70
CODEC_RAW = 0x55

# Multihash function code for sha2-256
HASH_SHA256 = 0x12

# Multibase prefix for base58btc
MULTIBASE_BASE58BTC = "z"


def compute_cid_v0(data: bytes) -> bytes:
    """
    Compute a CIDv0 for data.

    Args:
        data: The data to hash

    Returns:
        CIDv0 as bytes (a sha2-256 multihash)

    """
    return multihash.digest(data, multihash.Func.sha2_256).encode()


def compute_cid_v1(data: bytes, codec: int = CODEC_RAW) -> bytes:
    """
    Compute a CIDv1 for data.

    Args:
        data: The data to hash
        codec: Multicodec code (default: raw)

    Returns:
        CIDv1 as bytes

    Raises:
        InvalidCIDError: If the codec does not fit in a single varint byte

    """
    if not 0 <= codec < 0x80:
        raise InvalidCIDError(f"Unsupported codec {hex(codec)}")
    return bytes([CID_V1, codec]) + compute_cid_v0(data)


def compute_cid(data: bytes, version: int = CID_V1, codec: int = CODEC_RAW) -> bytes:
    """
    Compute a CID for data with the given version.

    Args:
        data: The data to hash
        version: CID version (0 or 1)
        codec: Multicodec code (for v1 only)

    Returns:
        CID bytes

    """
    if version == CID_V0:
        return compute_cid_v0(data)
    if version == CID_V1:
        return compute_cid_v1(data, codec)
    raise InvalidCIDError(f"Unsupported CID version {version}")


def parse_cid_version(cid: bytes) -> int:
    """Return the version of a CID (0 or 1)."""
    if len(cid) > 0 and cid[0] == CID_V1:
        return CID_V1
    return CID_V0


def _multihash_part(cid: bytes) -> bytes:
    if parse_cid_version(cid) == CID_V1:
        if len(cid) < 4:
            raise InvalidCIDError(f"CIDv1 too short: {cid.hex()}")
        return cid[2:]
    return cid


def _decode(cid: bytes) -> "multihash.Multihash":
    try:
        return multihash.decode(_multihash_part(cid))
    except (ValueError, KeyError, IndexError) as e:
        raise InvalidCIDError(f"Malformed CID {cid.hex()}: {e}") from e


def validate_cid(cid: bytes) -> None:
    """
    Check that a CID is well formed.

    Raises:
        InvalidCIDError: If the CID cannot be decoded

    """
    _decode(cid)


def verify_cid(cid: bytes, data: bytes) -> bool:
    """
    Verify that data matches the given CID.

    Args:
        cid: The CID to verify
        data: The data to check

    Returns:
        True if data matches CID, False otherwise (including malformed CIDs)

    """
    try:
        mh = _decode(cid)
    except InvalidCIDError:
        logger.debug("verify_cid: malformed CID %s", cid.hex())
        return False
    match = mh.verify(data)
    if not match:
        logger.debug(
            "verify_cid: digest mismatch for %s (%d bytes)", cid.hex(), len(data)
        )
    return match


def cid_to_string(cid: bytes) -> str:
    """
    Render a CID as text.

    CIDv0 renders as a bare base58btc multihash, CIDv1 as a multibase
    base58btc string.
    """
    encoded = base58.b58encode(cid).decode()
    if parse_cid_version(cid) == CID_V1:
        return MULTIBASE_BASE58BTC + encoded
    return encoded


def cid_from_string(text: str) -> bytes:
    """
    Parse a CID rendered by :func:`cid_to_string`.

    Raises:
        InvalidCIDError: If the text is not a valid CID

    """
    # CIDv0 strings carry no multibase prefix and always start with "Qm"
    multibase = text.startswith(MULTIBASE_BASE58BTC)
    body = text[len(MULTIBASE_BASE58BTC) :] if multibase else text
    try:
        cid = base58.b58decode(body)
    except ValueError as e:
        raise InvalidCIDError(f"Invalid CID string {text!r}") from e
    if multibase and parse_cid_version(cid) != CID_V1:
        raise InvalidCIDError(f"Multibase CID string is not a CIDv1: {text!r}")
    validate_cid(cid)
    return cid
