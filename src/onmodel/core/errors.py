"""Exception hierarchy for On-Model Studio.

Only :class:`ConfigurationError` and :class:`BatchValidationError` ever leave
the batch orchestrator.  Every other exception here is raised inside the job
dispatcher and converted into a failed job result at its boundary, so one bad
job never aborts its siblings.

The message of each exception is intended to be shown directly to the user.
"""


class OnModelError(Exception):
    """Base class for all On-Model Studio errors."""

    pass


class ConfigurationError(OnModelError):
    """The service is missing configuration needed to run a batch."""

    pass


class BatchValidationError(OnModelError):
    """A batch request was rejected before any job ran."""

    pass


class ProviderError(OnModelError):
    """The image-generation provider rejected a call or returned garbage."""

    pass


class SubmissionError(ProviderError):
    """Creating a prediction failed."""

    pass


class PollingError(ProviderError):
    """Fetching the status of a prediction failed."""

    pass


class GenerationTimeout(OnModelError):
    """A prediction was still running when the per-job deadline passed."""

    pass


class GenerationFailed(OnModelError):
    """The provider finished a prediction without a usable image."""

    pass
