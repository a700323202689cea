"""Error taxonomy for the optimization call."""

from __future__ import annotations


class PromptTuneError(Exception):
    """Base class for failures surfaced to the user."""


class ConfigurationError(PromptTuneError):
    """No usable access credential. Shown to the user verbatim."""


class RemoteError(PromptTuneError):
    """The remote call raised or came back empty."""


class MalformedResponseError(PromptTuneError):
    """The reply could not be parsed into the declared schema."""


GENERIC_ERROR_MESSAGE = "Prompt optimization failed. Please try again."
INTERRUPTED_MESSAGE = "Prompt optimization was interrupted. Please try again."
