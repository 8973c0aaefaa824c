from __future__ import annotations


class EssayFeedbackError(Exception):
	"""Base class for errors raised by the essay feedback service."""


class EssayValidationError(EssayFeedbackError):
	"""The submission cannot be analysed (essay too short, prompt missing)."""


class UpstreamUnavailable(EssayFeedbackError):
	"""The LLM service could not be reached or is not configured."""


class UpstreamFormatError(EssayFeedbackError):
	"""The LLM answered, but not with a usable JSON object."""

	def __init__(self, message: str, raw: str | None = None) -> None:
		super().__init__(message)
		self.raw = raw
