# Namespace for pipeline steps
from .resolve_company import ResolveCompanyDomain  # noqa: F401
from .archive_profile import ArchiveProfile  # noqa: F401
from .record_history import RecordHistory, RecordSearchResults  # noqa: F401
