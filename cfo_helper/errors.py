"""Exception hierarchy for user-facing failures."""


class CFOHelperError(Exception):
    """Base class for application errors."""


class AdvisorError(CFOHelperError):
    """The advisor rejected a message before contacting the model."""


class RateLimitError(AdvisorError):
    """Too many advisor requests in a short period."""


class MessageValidationError(AdvisorError):
    """The chat message is empty or too long."""


class ReportExportError(CFOHelperError):
    """A PDF report could not be produced."""


class IdentityError(CFOHelperError):
    """A call to the identity provider failed."""


class MissingResultsError(ReportExportError):
    """Export was requested before any simulation was run."""
