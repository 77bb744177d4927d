"""Error types raised while analyzing certificate and key files.

Analyzers raise these internally and convert them into the ``error`` field of
the record they return; they never escape ``analyze_certificate`` or
``analyze_key``.
"""


class CertmetaError(Exception):
    """Base class for all analysis failures."""


class FileReadError(CertmetaError):
    """File missing, unreadable, or larger than allowed."""


class PemDecodeError(CertmetaError):
    """No PEM block could be decoded."""


class CertificateParseError(CertmetaError):
    """A PEM block decoded but does not hold a valid X.509 certificate."""


class UnsupportedKeyFormatError(CertmetaError):
    """Every known private key encoding was tried without success."""


class UnknownKeyTypeError(CertmetaError):
    """A key parsed, but its algorithm is not RSA, ECDSA or Ed25519."""
