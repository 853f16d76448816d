from __future__ import annotations

from typing import Optional, Protocol


class CompanyLookupPort(Protocol):
    def resolve_domain(self, company: str) -> Optional[str]:
        ...
