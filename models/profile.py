from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from models.email_value import EmailValue


class CandidateRecord(BaseModel):
    """Lightweight profile summary from a search-results page."""

    external_id: str
    name: str
    headline: str | None = None
    location: str | None = None
    company: str | None = None
    summary: str | None = None
    url: str
    avatar_url: str | None = None

    model_config = ConfigDict(extra="ignore")


class Experience(BaseModel):
    title: str
    company: str | None = None


class Profile(CandidateRecord):
    """Full profile. Any field extraction could not locate stays empty."""

    external_id: str | None = None  # type: ignore[assignment]
    name: str | None = None  # type: ignore[assignment]
    url: str | None = None  # type: ignore[assignment]

    about: str | None = None
    skills: list[str] = Field(default_factory=list)
    posts: list[str] = Field(default_factory=list)
    experiences: list[Experience] = Field(default_factory=list)
    interests: list[str] = Field(default_factory=list)
    education: str | None = None
    email: EmailValue = Field(default_factory=EmailValue.missing)
    company_domain: str | None = None

    @property
    def activity_indicators(self) -> dict[str, object]:
        return {
            "has_recent_posts": bool(self.posts),
            "post_count": len(self.posts),
            "skill_count": len(self.skills),
            "interest_count": len(self.interests),
        }
