"""
Error taxonomy.

We separate error types so callers can react correctly.
Example:
RemoteError means a service could not be reached or answered garbage.
ApplicationError means the service answered 2xx but embedded an error code.
NotFoundWarning is never raised. It is emitted and logged, and the run goes on.
"""


class ReconcilerError(Exception):
    """Base class for all reconciler exceptions."""


class ConfigError(ReconcilerError):
    """Raised when configuration is missing or cannot be parsed."""


class RemoteError(ReconcilerError):
    """Raised on transport failure, non 2xx status, or unparsable json."""


class DecodeError(RemoteError):
    """Raised when a json response lacks a field we depend on."""


class ApplicationError(ReconcilerError):
    """Raised when a 2xx response carries an embedded server side error code."""


class NotFoundWarning(UserWarning):
    """Emitted when the configuration database knows no facts for a host."""
