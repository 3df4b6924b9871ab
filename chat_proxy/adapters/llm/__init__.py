"""Chat-completion upstream adapters."""

from chat_proxy.adapters.llm.base import AbstractChatCompletionClient
from chat_proxy.adapters.llm.factory import create_chat_client
from chat_proxy.adapters.llm.perplexity_client import PerplexityClient

__all__ = [
    "AbstractChatCompletionClient",
    "PerplexityClient",
    "create_chat_client",
]
