from assistant.chat import ChatOrchestrator
from assistant.errors import (
    ChatValidationError,
    ConfigurationError,
    ProviderError,
    SupportChatError,
)

__all__ = [
    "ChatOrchestrator",
    "ChatValidationError",
    "ConfigurationError",
    "ProviderError",
    "SupportChatError",
]
