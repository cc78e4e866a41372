"""Exceptions raised by the stale issue reminder."""


class StaleReminderError(Exception):
    """Base class for reminder errors."""


class ConfigurationError(StaleReminderError, ValueError):
    """Missing or malformed run configuration. Always fatal."""


class FetchError(StaleReminderError):
    """A paginated read (issue listing or column cards) failed."""

    def __init__(self, source: str, page: int, cause: Exception):
        self.source = source
        self.page = page
        self.cause = cause
        super().__init__(f"Failed to fetch {source} page {page + 1}: {cause}")


class EvaluationError(StaleReminderError):
    """The timeline lookup for a single issue failed."""

    def __init__(self, issue_number: int, cause: Exception):
        self.issue_number = issue_number
        self.cause = cause
        super().__init__(f"Could not evaluate issue #{issue_number}: {cause}")


class NotifyError(StaleReminderError):
    """Posting the reminder comment on a single issue failed."""

    def __init__(self, issue_number: int, cause: Exception):
        self.issue_number = issue_number
        self.cause = cause
        super().__init__(f"Could not comment on issue #{issue_number}: {cause}")
