from .browser import BrowserPort, PageControlPort
from .lookup import CompanyLookupPort
from .repos import ArchiveRepoPort, HistoryRepoPort, SessionsRepoPort

__all__ = [
    "BrowserPort",
    "PageControlPort",
    "CompanyLookupPort",
    "ArchiveRepoPort",
    "HistoryRepoPort",
    "SessionsRepoPort",
]
