from __future__ import annotations

from models.email_value import EmailValue
from models.profile import Profile
from services.reporting import print_profile_summary


def test_profile_summary_shows_activity(capsys):
    profile = Profile(
        name="Jane Doe",
        headline="Head of Sales at Acme",
        skills=["Sales"],
        posts=["Post number 1: thoughts on building durable sales pipelines."],
        interests=["Sales Hacker", "Harvard Business Review"],
        email=EmailValue.real("jane@example.com"),
    )
    print_profile_summary(profile)
    out = capsys.readouterr().out
    assert "Email: jane@example.com" in out
    assert "Recent Posts: 1" in out
    assert "Interests: 2" in out
    assert "Active: yes" in out


def test_profile_summary_without_activity(capsys):
    print_profile_summary(Profile(name="John Smith"))
    out = capsys.readouterr().out
    assert "Email: missing" in out
    assert "Recent Posts: 0" in out
    assert "Active: no" in out
