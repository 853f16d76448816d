from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class SearchCriteria(BaseModel):
    """People-search intent. ``keywords`` holds free-text location."""

    job_title: str | None = None
    industry: str | None = None
    keywords: str | None = None
    company: str | None = None

    model_config = ConfigDict(extra="ignore", frozen=True)

    def present_fields(self) -> dict[str, str]:
        """Non-empty fields with surrounding whitespace trimmed."""
        present: dict[str, str] = {}
        for name, value in self.model_dump().items():
            if value is not None and str(value).strip():
                present[name] = str(value).strip()
        return present


class SearchRequest(BaseModel):
    """Executable people-search request produced by the query builder."""

    url: str
    keywords: str = ""
    geo_urn: str | None = None
    page: int = 1
