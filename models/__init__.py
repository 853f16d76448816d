from .email_value import EmailKind, EmailValue
from .search_criteria import SearchCriteria, SearchRequest
from .profile import CandidateRecord, Experience, Profile
from .archived_profile import ArchivedProfile
from .history import GroupedHistory, HistoryEntry, HistoryStats
from .session import Session, SessionState
from .search_response import Pagination, SearchResponse

__all__ = [
    "EmailKind",
    "EmailValue",
    "SearchCriteria",
    "SearchRequest",
    "CandidateRecord",
    "Experience",
    "Profile",
    "ArchivedProfile",
    "GroupedHistory",
    "HistoryEntry",
    "HistoryStats",
    "Session",
    "SessionState",
    "Pagination",
    "SearchResponse",
]
