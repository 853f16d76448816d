from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from models.email_value import EmailValue


# Fields compared and merged by the archive; timestamps and identity excluded.
MERGEABLE_FIELDS: tuple[str, ...] = (
    "url",
    "name",
    "headline",
    "location",
    "company",
    "company_domain",
    "avatar",
    "about",
    "skills",
)


class ArchivedProfile(BaseModel):
    """App/DB record shape for one archived profile of one owner."""

    id: int | None = None
    owner_id: str
    url: str
    normalized_url: str
    name: str | None = None
    headline: str | None = None
    location: str | None = None
    company: str | None = None
    company_domain: str | None = None
    email: EmailValue = Field(default_factory=EmailValue.missing)
    avatar: str | None = None
    about: str | None = None
    skills: list[str] = Field(default_factory=list)
    scraped_at: datetime
    updated_at: datetime
    version: int = 1

    model_config = ConfigDict(extra="ignore")

    @property
    def email_address(self) -> str | None:
        return self.email.address

    @property
    def email_is_fallback(self) -> bool:
        return self.email.is_fallback

    def content_equals(self, other: "ArchivedProfile") -> bool:
        """True when every merged field and the email tag are identical."""
        if self.email != other.email:
            return False
        return all(getattr(self, f) == getattr(other, f) for f in MERGEABLE_FIELDS)
