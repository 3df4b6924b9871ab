from abc import ABC, abstractmethod
from typing import Any


class AbstractChatCompletionClient(ABC):
	"""Interface for clients that forward chat-completion requests upstream."""

	@abstractmethod
	async def complete(self, payload: dict[str, Any]) -> dict[str, Any]:
		"""Send a fully normalized chat-completion payload upstream.

		Args:
			payload: Request body in the upstream's wire format.

		Returns:
			dict[str, Any]: The upstream's JSON response body, unmodified.

		Raises:
			UpstreamAppError: On a non-success status, network failure or timeout.
		"""
		...

	async def aclose(self) -> None:
		"""Release network resources held by the client."""
		return None
