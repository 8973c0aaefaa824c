from __future__ import annotations

from .schemas import LinguisticMetrics
from .validation import count_words


def _has_any(essay: str, *needles: str) -> bool:
	return any(n in essay for n in needles)


def estimate_metrics(essay: str) -> LinguisticMetrics:
	"""Keyword-presence stand-ins for the six linguistic metrics.

	None of these parse the text: lexical diversity is a length proxy and the
	rest flip between two fixed values on a keyword.
	"""
	words = count_words(essay)
	return LinguisticMetrics(
		lexical_diversity=min(0.8, words / 500),
		academic_word_coverage=12.5 if _has_any(essay, "significant", "furthermore") else 8.2,
		lexical_prevalence=2.8 if "sophisticated" in essay else 3.5,
		c_unit_complexity=1.4 if _has_any(essay, "although", "because") else 1.1,
		verb_phrase_ratio=1.2,
		dependent_clause_ratio=0.35 if _has_any(essay, "which", "that") else 0.22,
	)
