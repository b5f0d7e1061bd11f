"""Error taxonomy for overlap detection runs.

Library code raises these; only the CLI turns them into exit codes.
"""


class GitOverlapError(Exception):
    """Base class for every fatal error in a run."""


class ConfigurationError(GitOverlapError):
    """Bad or missing input detected before any network call."""


class UnsupportedProviderError(GitOverlapError):
    """The remote URL does not belong to a supported hosting provider."""


class TransportError(GitOverlapError):
    """The provider API or CLI reported a failure."""


class MalformedResponseError(GitOverlapError):
    """The provider answered, but not with the data we expected."""
