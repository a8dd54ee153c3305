"""Exceptions raised by the service worker generator.

All of these are validation errors: they are raised immediately by the
constructor or a registration call, before any state is touched, and are
never retried.
"""


class ServiceWorkerGeneratorError(Exception):
    """Base class for every error raised by swgen."""


class PathOutsideRootError(ServiceWorkerGeneratorError):
    """Raised when a path resolves outside the trusted document root."""

    def __init__(self, path: str, root: str) -> None:
        self.path = path
        self.root = root
        super().__init__(f"'{path}' is outside of '{root}'")


class InvalidNameError(ServiceWorkerGeneratorError, ValueError):
    """Raised when a cache name or state-file name contains disallowed characters."""


class InvalidDirectoryIndexPathError(ServiceWorkerGeneratorError, ValueError):
    """Raised when a directory index path is malformed or escapes the root."""


class GeneratorFinalizedError(ServiceWorkerGeneratorError, RuntimeError):
    """Raised when a generator is used after finalize()."""
