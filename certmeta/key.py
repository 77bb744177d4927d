"""Private key analysis.

Key files in the wild hold more than the key: ``openssl ecparam -genkey``
writes an ``EC PARAMETERS`` block ahead of the key, and bundles sometimes
carry unrelated PEM blocks. Every block is tried in turn against each known
private key encoding until one of them yields a key of a supported type;
a DSA or Ed448 key ahead of the real one is passed over like any other
unusable block.
"""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, rsa

from . import pem
from .errors import CertmetaError, PemDecodeError, UnknownKeyTypeError, UnsupportedKeyFormatError
from .models import KeyRecord
from .reader import PathType, read_file

logger = logging.getLogger(__name__)

EC_PARAMETERS = "EC PARAMETERS"


class KeyType(str, Enum):
    """Reported key algorithm labels."""
    RSA = "rsa"
    ECDSA = "ecdsa"


@dataclass(frozen=True)
class KeyStrategy:
    """One private key encoding.

    The block payload is re-armored under ``label`` so the parser reads it
    strictly as that encoding, whatever label the file itself used.
    """
    name:   str
    label:  str

    def load(self, der: bytes) -> Optional[Any]:
        """Return the parsed private key, or None if ``der`` is not in this encoding."""
        try:
            return serialization.load_pem_private_key(pem.encode(self.label, der), password=None)
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            logger.debug(f"Not a {self.name} private key: {e}")
            return None


# tried in this order, first hit wins
KEY_STRATEGIES = (
    KeyStrategy("PKCS#8", "PRIVATE KEY"),
    KeyStrategy("PKCS#1 RSA", "RSA PRIVATE KEY"),
    KeyStrategy("SEC 1 EC", "EC PRIVATE KEY"),
)


def load_private_key(block: pem.PemBlock) -> Optional[Any]:
    """Try every strategy on a PEM block's payload."""
    for strategy in KEY_STRATEGIES:
        key = strategy.load(block.data)
        if key is not None:
            logger.debug(f"Loaded '{block.type}' block as {strategy.name}")
            return key
    return None


def classify(key: Any) -> Tuple[KeyType, int]:
    """Map a parsed private key to its reported type and size.

    Ed25519 keys are reported as ``ecdsa`` with their raw key length in
    bytes (32), which is how existing consumers of this output see them.

    Raises:
        UnknownKeyTypeError: key is none of RSA, ECDSA or Ed25519
    """
    if isinstance(key, rsa.RSAPrivateKey):
        return KeyType.RSA, key.key_size
    if isinstance(key, ec.EllipticCurvePrivateKey):
        return KeyType.ECDSA, key.curve.key_size
    if isinstance(key, ed25519.Ed25519PrivateKey):
        raw = key.private_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PrivateFormat.Raw,
            encryption_algorithm=serialization.NoEncryption()
        )
        return KeyType.ECDSA, len(raw)
    raise UnknownKeyTypeError(f"unknown key type {type(key).__name__}")


def analyze_key(path: PathType, max_file_size: Optional[int] = None) -> KeyRecord:
    """Determine the algorithm and size of the private key in a file.

    Never raises; failures are reported through the record's ``error``.

    Args:
        path: Key file
        max_file_size: Refuse files larger than this many bytes

    Returns:
        KeyRecord for ``path``
    """
    filename = os.fspath(path)
    try:
        key_type, size = _extract(filename, max_file_size)
    except CertmetaError as e:
        logger.info(f"Key analysis failed for {filename}: {e}")
        return KeyRecord(file=filename, error=str(e))
    except Exception as e:
        logger.exception(f"Unexpected error analyzing key {filename}")
        return KeyRecord(file=filename, error=f"unexpected error analyzing {filename}: {e}")

    logger.debug(f"Parsed {key_type.value} key ({size}) from {filename}")
    return KeyRecord(file=filename, type=key_type.value, size=size)


def _extract(filename: str, max_file_size: Optional[int]) -> Tuple[KeyType, int]:
    data = read_file(filename, max_file_size)

    blocks_seen = 0
    unknown_type = None
    for block in pem.iter_blocks(data):
        blocks_seen += 1
        if block.type == EC_PARAMETERS:
            logger.debug(f"Skipping {EC_PARAMETERS} block in {filename}")
            continue

        key = load_private_key(block)
        if key is None:
            logger.debug(f"PEM block '{block.type}' in {filename} is not a usable private key")
            continue

        try:
            return classify(key)
        except UnknownKeyTypeError as e:
            # a later block may still hold a supported key
            logger.debug(f"PEM block '{block.type}' in {filename}: {e}")
            if unknown_type is None:
                unknown_type = e

    if unknown_type is not None:
        raise unknown_type

    message = f"unknown key format or unsupported key type for {filename}"
    if not blocks_seen:
        raise PemDecodeError(message)
    raise UnsupportedKeyFormatError(message)
