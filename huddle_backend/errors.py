from __future__ import annotations


class HuddleError(Exception):
    """Base class for errors raised by the huddle backend."""


class HuddleNotFound(HuddleError, LookupError):
    """A huddle id, channel name or membership does not exist."""

    def __init__(self, message: str = "huddle not found") -> None:
        super().__init__(message)
        self.message = message


class CredentialError(HuddleError, ValueError):
    """A token request could not be turned into a credential."""


class ConfigurationError(HuddleError, RuntimeError):
    """Required settings are missing or invalid."""


class CredentialParamError(CredentialError):
    """A token request parameter (such as expiry) could not be parsed."""
