from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, model_validator


class EmailKind(str, Enum):
    MISSING = "missing"
    FALLBACK = "fallback"
    REAL = "real"


class EmailValue(BaseModel):
    """Closed tagged email: Missing | Fallback | Real(address).

    Merge and display logic branch on ``kind`` only; ``address`` is the payload
    of REAL and an optional display placeholder for FALLBACK.
    """

    kind: EmailKind = EmailKind.MISSING
    address: str | None = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_payload(self) -> "EmailValue":
        if self.kind is EmailKind.REAL and not self.address:
            raise ValueError("a real email needs an address")
        if self.kind is EmailKind.MISSING and self.address is not None:
            raise ValueError("a missing email carries no address")
        return self

    @classmethod
    def missing(cls) -> "EmailValue":
        return cls(kind=EmailKind.MISSING)

    @classmethod
    def fallback(cls, placeholder: str | None = None) -> "EmailValue":
        return cls(kind=EmailKind.FALLBACK, address=placeholder)

    @classmethod
    def real(cls, address: str) -> "EmailValue":
        return cls(kind=EmailKind.REAL, address=address.strip())

    @property
    def is_real(self) -> bool:
        return self.kind is EmailKind.REAL

    @property
    def is_fallback(self) -> bool:
        return self.kind is EmailKind.FALLBACK
