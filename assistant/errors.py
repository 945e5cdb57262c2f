class SupportChatError(Exception):
    """Base class for errors raised by the chat core."""


class ChatValidationError(SupportChatError):
    """Request is missing a session identifier or message."""


class ConfigurationError(SupportChatError):
    """Provider selection or credentials are invalid."""


class ProviderError(SupportChatError):
    """A hosted generation call failed or returned an unusable payload."""
