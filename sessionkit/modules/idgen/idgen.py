import base64
import logging
import re
import secrets

from ...errors import EntropyError

logger = logging.getLogger(__name__)

# 256 bits
DEFAULT_TOKEN_BYTES = 32
MIN_TOKEN_BYTES = 16

# Length bounds of an unpadded urlsafe-b64 encoding of 16..128 bytes
_TOKEN_PATTERN = re.compile(r"^[A-Za-z0-9_-]{22,171}$")


def generate_token(nbytes: int = DEFAULT_TOKEN_BYTES) -> str:
    """
    Generate a new session token.

    Args:
        nbytes: Number of random bytes to draw (at least 16)

    Returns:
        URL-safe base64 text without padding

    Raises:
        ValueError: If nbytes is below the minimum
        EntropyError: If the system random source fails
    """
    if nbytes < MIN_TOKEN_BYTES:
        raise ValueError(f"Token size must be at least {MIN_TOKEN_BYTES} bytes, got {nbytes}")

    try:
        raw = secrets.token_bytes(nbytes)
    except (OSError, NotImplementedError) as e:
        logger.critical(f"Entropy source failure while generating session token: {e}")
        raise EntropyError("Unable to read from the system random source") from e

    if len(raw) != nbytes:
        raise EntropyError(f"Short read from random source: {len(raw)} of {nbytes} bytes")

    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def is_well_formed(token: str) -> bool:
    """Check that a client-supplied token looks like one we could have issued."""
    return bool(token) and _TOKEN_PATTERN.match(token) is not None
