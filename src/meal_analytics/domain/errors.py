"""Error taxonomy for analytics and reporting."""


class AnalyticsError(Exception):
    """Base class for errors raised by the analytics core."""


class InvalidProfile(AnalyticsError):
    """Health profile input is missing a field or is out of range."""


class InvalidMeal(AnalyticsError):
    """Meal entry input is invalid."""


class InvalidRange(AnalyticsError):
    """Date range is malformed, e.g. the end precedes the start."""


class RangeTooLarge(AnalyticsError):
    """Date range spans more days than the configured maximum."""


class StoreUnavailable(AnalyticsError):
    """The persistent store could not be read or written."""


class GenerationError(AnalyticsError):
    """The narrative generator failed."""


class GenerationTimeout(GenerationError):
    """The narrative generator did not answer in time."""


class NotFound(AnalyticsError):
    """A requested record does not exist for the caller."""


class ReportNotFound(NotFound):
    """Report is missing or owned by another user."""


class MealNotFound(NotFound):
    """Meal entry is missing or owned by another user."""
