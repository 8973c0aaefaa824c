from __future__ import annotations

from .assembler import assemble_fallback
from .elements import detect_elements
from .metrics import estimate_metrics
from .schemas import AnalysisResult
from .scoring import score_essay


def build_fallback_analysis(essay: str, prompt: str) -> AnalysisResult:
	"""Deterministic analysis used when the LLM path is unavailable.

	The prompt is accepted for parity with the LLM path; the heuristics only
	read the essay. Identical input always yields an identical result.
	"""
	score = score_essay(essay)
	elements = detect_elements(essay)
	metrics = estimate_metrics(essay)
	return assemble_fallback(essay, score, elements, metrics)
