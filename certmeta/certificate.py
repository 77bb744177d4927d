"""X.509 certificate analysis."""

import logging
import os
import warnings
from typing import Any, Dict, Optional, Tuple

from cryptography import x509

from . import pem
from .errors import CertificateParseError, CertmetaError, PemDecodeError
from .models import CertificateRecord
from .reader import PathType, read_file

logger = logging.getLogger(__name__)

# what cryptography raises for structurally broken certificates
PARSE_ERRORS = (ValueError, x509.DuplicateExtension, x509.UnsupportedGeneralNameType)


def analyze_certificate(path: PathType, max_file_size: Optional[int] = None) -> CertificateRecord:
    """Extract subject, issuer, validity and SAN DNS names from a certificate file.

    Only the first PEM block in the file is looked at. Never raises: any
    failure ends up in the record's ``error`` field, with every other field
    left unset.

    Args:
        path: Certificate file
        max_file_size: Refuse files larger than this many bytes

    Returns:
        CertificateRecord for ``path``
    """
    filename = os.fspath(path)
    try:
        fields = _extract(filename, max_file_size)
    except CertmetaError as e:
        logger.info(f"Certificate analysis failed for {filename}: {e}")
        return CertificateRecord(file=filename, error=str(e))
    except Exception as e:
        logger.exception(f"Unexpected error analyzing certificate {filename}")
        return CertificateRecord(file=filename, error=f"unexpected error analyzing {filename}: {e}")

    logger.debug(f"Parsed certificate {filename}: {fields['subject']}")
    return CertificateRecord(file=filename, **fields)


def _extract(filename: str, max_file_size: Optional[int]) -> Dict[str, Any]:
    data = read_file(filename, max_file_size)

    block, _ = pem.decode(data)
    if block is None:
        raise PemDecodeError(f"failed to decode PEM block for {filename}")

    try:
        with warnings.catch_warnings():
            # e.g. "Parsed a serial number which wasn't positive"
            warnings.simplefilter("ignore")
            cert = x509.load_der_x509_certificate(block.data)
            return {
                "subject":      cert.subject.rfc4514_string(),
                "issuer":       cert.issuer.rfc4514_string(),
                "not_before":   cert.not_valid_before_utc,
                "not_after":    cert.not_valid_after_utc,
                "dns_names":    _dns_names(cert),
            }
    except PARSE_ERRORS as e:
        raise CertificateParseError(str(e) or f"failed to parse certificate in {filename}") from e


def _dns_names(cert: x509.Certificate) -> Tuple[str, ...]:
    """DNS entries of the Subject Alternative Name extension, in order."""
    try:
        san = cert.extensions.get_extension_for_class(x509.SubjectAlternativeName)
    except x509.ExtensionNotFound:
        return ()
    return tuple(san.value.get_values_for_type(x509.DNSName))
