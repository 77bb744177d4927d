"""Metadata extraction for PEM encoded X.509 certificates and private keys."""

from .bundle import WELL_KNOWN_FILES, BundleReport, analyze_directory
from .certificate import analyze_certificate
from .errors import (
    CertificateParseError,
    CertmetaError,
    FileReadError,
    PemDecodeError,
    UnknownKeyTypeError,
    UnsupportedKeyFormatError,
)
from .key import KeyType, analyze_key
from .models import CertificateRecord, KeyRecord
from .settings import Settings

__version__ = "0.1.0"

__all__ = [
    "BundleReport",
    "CertificateParseError",
    "CertificateRecord",
    "CertmetaError",
    "FileReadError",
    "KeyRecord",
    "KeyType",
    "PemDecodeError",
    "Settings",
    "UnknownKeyTypeError",
    "UnsupportedKeyFormatError",
    "WELL_KNOWN_FILES",
    "analyze_certificate",
    "analyze_directory",
    "analyze_key",
]
