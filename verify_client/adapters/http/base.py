from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True)
class HttpResponse:
	"""Status and decoded JSON body of a completed request.

	Attributes:
		status: HTTP status code.
		body: Parsed JSON payload, or None when the body was not JSON.
	"""

	status: int
	body: Any = None

	@property
	def ok(self) -> bool:
		return 200 <= self.status < 300


class AbstractHttpClient(ABC):
	"""Interface for the transport used by the verification client."""

	@abstractmethod
	async def get(self, url: str, headers: Mapping[str, str] | None = None) -> HttpResponse:
		"""Perform a GET request and decode the JSON body.

		Args:
			url: Absolute URL to request.
			headers: Optional request headers.

		Returns:
			HttpResponse: Status and parsed body. Non-2xx statuses are returned,
			not raised.

		Raises:
			TransportError: If the request could not be completed at all.
		"""
		...

	async def aclose(self) -> None:
		"""Release any pooled connections."""
		return None
