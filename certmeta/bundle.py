"""Analysis of a certificate directory holding the usual set of files.

ACME clients such as dehydrated or certbot keep one directory per domain with
``privkey.pem``, ``cert.pem``, ``chain.pem`` and ``fullchain.pem``.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

from .certificate import analyze_certificate
from .key import analyze_key
from .models import CertificateRecord, KeyRecord
from .reader import PathType
from .settings import Settings

logger = logging.getLogger(__name__)

KEY_ENTRY = "key"

# entry name -> file name
WELL_KNOWN_FILES = {
    KEY_ENTRY:      "privkey.pem",
    "cert":         "cert.pem",
    "chain":        "chain.pem",
    "fullchain":    "fullchain.pem",
}


@dataclass
class BundleReport:
    """Records for each well-known file of one directory."""
    directory:  str
    entries:    Dict[str, Union[CertificateRecord, KeyRecord]] = field(default_factory=dict)
    error:      Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and all(record.ok for record in self.entries.values())

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {name: record.to_dict() for name, record in self.entries.items()}
        if self.error is not None:
            result["error"] = self.error
        return result


def analyze_directory(directory: PathType, settings: Optional[Settings] = None) -> BundleReport:
    """Analyze the key and the three certificate files of a directory.

    A failing file does not stop the others; its record simply carries an
    error.
    """
    settings = settings or Settings()
    directory = os.fspath(directory)

    if not os.path.isdir(directory):
        logger.warning(f"Skipping '{directory}', not a directory")
        return BundleReport(directory=directory, error=f"domain directory does not exist: {directory}")

    report = BundleReport(directory=directory)
    for name, filename in WELL_KNOWN_FILES.items():
        path = os.path.join(directory, filename)
        if name == KEY_ENTRY:
            record = analyze_key(path, settings.max_file_size)
        else:
            record = analyze_certificate(path, settings.max_file_size)

        if not record.ok:
            logger.warning(f"Error processing {path}: {record.error}")
        report.entries[name] = record

    return report
