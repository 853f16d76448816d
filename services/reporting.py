from __future__ import annotations

from typing import List

from models.history import GroupedHistory, HistoryStats
from models.profile import Profile
from models.search_criteria import SearchCriteria
from models.search_response import SearchResponse


def print_search_summary(criteria: SearchCriteria, response: SearchResponse) -> None:
    """Print a human-readable summary of one people search."""
    print("\n" + "=" * 60)
    print("LINKEDIN PEOPLE SEARCH - SUMMARY")
    print("=" * 60)
    for name, value in criteria.present_fields().items():
        print(f"{name.replace('_', ' ').title()}: {value}")
    print(f"New Profiles: {response.pagination.total}")
    print(f"More Available: {'yes' if response.pagination.has_more else 'no'}")
    if response.message:
        print(f"Note: {response.message}")
    print()
    for i, row in enumerate(response.results, start=1):
        line = f"  {i:>2}. {row.name}"
        if row.headline:
            line += f" - {row.headline}"
        print(line)
        print(f"      {row.url}")
    print("=" * 60)


def print_profile_summary(profile: Profile) -> None:
    print("\n" + "=" * 60)
    print(f"{profile.name or 'Unknown'}")
    print("=" * 60)
    print(f"Headline: {profile.headline or 'N/A'}")
    print(f"Company: {profile.company or 'N/A'}")
    print(f"Location: {profile.location or 'N/A'}")
    print(f"Email: {profile.email.address if profile.email.is_real else profile.email.kind.value}")
    print(f"Skills: {', '.join(profile.skills) if profile.skills else 'N/A'}")
    activity = profile.activity_indicators
    print(f"Recent Posts: {activity['post_count']}")
    print(f"Interests: {activity['interest_count']}")
    print(f"Active: {'yes' if activity['has_recent_posts'] else 'no'}")
    print("=" * 60)


def print_history_summary(groups: List[GroupedHistory], stats: HistoryStats) -> None:
    print(f"Total Views: {stats.total}")
    print(f"Unique Searches: {stats.unique_searches}")
    print(f"Last Viewed: {stats.last_viewed.isoformat() if stats.last_viewed else 'N/A'}")
    for group in groups:
        label = group.search_key or "(direct views)"
        print(f"  [{group.viewed_at:%Y-%m-%d %H:%M}] {label}: {group.count} profile(s)")
