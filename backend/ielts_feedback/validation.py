from __future__ import annotations

from typing import Optional, Tuple

from .errors import EssayValidationError


DEFAULT_MIN_WORDS = 200


def count_words(text: str) -> int:
	"""Whitespace-delimited word count."""
	return len((text or "").split())


def validate_submission(
	essay: Optional[str],
	prompt: Optional[str],
	*,
	min_words: int = DEFAULT_MIN_WORDS,
) -> Tuple[str, str]:
	"""Reject essays below ``min_words`` and blank prompts.

	Both strings are returned unchanged; nothing is normalised.
	"""
	if not essay or count_words(essay) < min_words:
		raise EssayValidationError(f"Essay must be at least {min_words} words")
	if not prompt or not prompt.strip():
		raise EssayValidationError("Essay prompt is required")
	return essay, prompt
