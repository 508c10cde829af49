"""
Exceptions raised by chainrouter.

Two families:

    RegistrationError   Raised while routes and mounts are being declared.
                        Bad templates, unknown methods and non-callable
                        handlers fail fast here, never at request time.

    ContextNotFoundError
                        Raised when a handler asks for the context of a
                        request that is not currently being dispatched.

Handler-signalled failures are NOT exceptions: handlers call
`RequestContext.fail()` and the router's error responder writes the
response.
"""

from typing import Optional


class RouterError(Exception):
    """Base class for every error raised by this package."""


class RegistrationError(RouterError, ValueError):
    """A route or mount could not be registered."""


class PatternError(RegistrationError):
    """
    A route template could not be compiled.

    Carries the offending template so startup logs point at the exact
    registration that failed.
    """

    def __init__(self, message: str, template: Optional[str] = None):
        super().__init__(message)
        self.template = template


class ContextNotFoundError(RouterError, LookupError):
    """No request context is registered for the given request."""
