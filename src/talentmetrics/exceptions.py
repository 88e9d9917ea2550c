"""Custom exception hierarchy for TalentMetrics."""


class TalentMetricsError(Exception):
    """Base exception for all TalentMetrics errors."""


class ConfigurationError(TalentMetricsError):
    """Raised when settings are invalid or missing."""


class UnknownTargetPolicyError(TalentMetricsError):
    """Raised when a criticality/toughness pair has no resume target."""


class InvalidTimestampError(TalentMetricsError):
    """Raised when a submission timestamp is not ISO-8601."""


class InvalidScopeError(TalentMetricsError):
    """Raised when a snapshot scope type and scope id do not fit together."""


class SelfAssignedTargetError(TalentMetricsError):
    """Raised when a target mapping names the same person as lead and member."""


class RecordNotFoundError(TalentMetricsError):
    """Raised when an update targets a row that does not exist."""
