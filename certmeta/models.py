"""Metadata records produced by the analyzers."""

from datetime import datetime
from typing import Any, Dict, Optional, Tuple

import pydantic


class _Record(pydantic.BaseModel):
    """Common behaviour for analysis records."""
    model_config = pydantic.ConfigDict(frozen=True)

    file:   str
    error:  Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the external map form, leaving out absent fields."""
        return self.model_dump(mode="json", exclude_none=True)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]):
        """Rebuild a record from the output of ``to_dict``."""
        return cls.model_validate(data)


class CertificateRecord(_Record):
    """Certificate metadata; success-only fields stay unset on error."""
    subject:    Optional[str] = None
    issuer:     Optional[str] = None
    not_before: Optional[datetime] = None
    not_after:  Optional[datetime] = None
    dns_names:  Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        # an empty SAN list is indistinguishable from no SAN list
        if not result.get("dns_names"):
            result.pop("dns_names", None)
        return result


class KeyRecord(_Record):
    """Private key metadata."""
    type:   Optional[str] = None
    size:   Optional[int] = None
