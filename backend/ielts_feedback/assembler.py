from __future__ import annotations

import logging
from typing import Any, Dict, List

from pydantic import ValidationError

from .elements import locate_span
from .errors import UpstreamFormatError
from .schemas import (
	AnalysisResult,
	ArgumentElements,
	ElementAnalysis,
	HolisticAssessment,
	LinguisticAnalysis,
	LinguisticMetrics,
	RubricFeedback,
)
from .scoring import HeuristicScore


logger = logging.getLogger(__name__)

FALLBACK_CONFIDENCE = "75%"
FALLBACK_NOTE = (
	"Note: This analysis was produced by the heuristic fallback scorer because "
	"the AI analysis service was unavailable."
)
RECOMMENDATION_COUNT = 3


def _tier(band: float, high: str, mid: str, low: str) -> str:
	if band >= 7:
		return high
	if band >= 6:
		return mid
	return low


def recommendations_for(band: float) -> List[str]:
	"""Three recommendations, split at the 6.0, 6.5 and 7.0 cut points."""
	return [
		"Develop your ideas more fully with detailed explanations"
		if band < 6
		else "Consider adding more sophisticated vocabulary and complex sentence structures",
		"Use more linking words and transitions between paragraphs"
		if band < 6.5
		else "Strengthen your evidence with more specific examples",
		"Practice writing longer, more detailed responses"
		if band < 7
		else "Focus on making your conclusion more impactful and memorable",
	]


def _rationale(band: float, word_count: int) -> str:
	return (
		f"This essay demonstrates {_tier(band, 'good', 'adequate', 'basic')} writing skills with {word_count} words. "
		"Your essay addresses the task and presents a clear opinion, but the ideas need deeper development "
		"and better connection between points. The vocabulary and grammar are mostly accurate but a bit basic "
		"and repetitive. With more precise wording and smoother transitions, this could easily move up a band."
	)


def _rubric_feedback(essay: str, band: float) -> RubricFeedback:
	weak = band < 6
	task = (
		f"Your essay {'adequately addresses' if band >= 6.5 else 'attempts to address'} the task requirements. "
		+ ("Ideas are well-developed." if band >= 7 else "Consider developing your ideas further.")
	)
	coherence = (
		("Good use of organizing language." if "Firstly" in essay else "Consider using more linking words.")
		+ f" Your essay shows {'adequate' if band >= 6 else 'basic'} organization."
	)
	lexical = f"Your vocabulary is {_tier(band, 'varied and appropriate', 'adequate for the task', 'limited but functional')}."
	if weak:
		lexical += " Try to use more sophisticated vocabulary."
	grammar = (
		"Your grammar shows "
		+ _tier(
			band,
			"good control with complex structures",
			"adequate control with some complex forms",
			"basic control with simple structures",
		)
		+ "."
	)
	if weak:
		grammar += " Practice using more varied sentence structures."
	return RubricFeedback(
		task_achievement=task,
		coherence_cohesion=coherence,
		lexical_resource=lexical,
		grammatical_range=grammar,
	)


def _summary(band: float, word_count: int) -> str:
	development = _tier(
		band,
		"The argument is well-structured with clear examples.",
		"The basic structure is present but could be developed further.",
		"Focus on developing your ideas more fully and using more sophisticated language.",
	)
	return (
		f"This essay demonstrates {_tier(band, 'good', 'adequate', 'developing')} writing skills. "
		f"The response {'addresses the task appropriately' if band >= 6.5 else 'attempts to address the task'} "
		f"with {word_count} words. {development} {FALLBACK_NOTE}"
	)


def assemble_fallback(
	essay: str,
	score: HeuristicScore,
	elements: ArgumentElements,
	metrics: LinguisticMetrics,
) -> AnalysisResult:
	band = score.holistic
	return AnalysisResult(
		holistic_score=band,
		confidence=FALLBACK_CONFIDENCE,
		score_rationale=_rationale(band, score.word_count),
		elements=elements,
		linguistic_metrics=metrics,
		rubric_scores=score.rubric,
		rubric_feedback=_rubric_feedback(essay, band),
		natural_language_summary=_summary(band, score.word_count),
		recommendations=recommendations_for(band),
	)


def attach_spans(essay: str, elements: ArgumentElements) -> ArgumentElements:
	"""Record offsets for element text the LLM quoted from the essay."""
	cursor = 0
	for _, element in elements.located():
		if not element.text or element.span is not None:
			continue
		span, cursor = locate_span(essay, element.text, cursor)
		element.span = span
	return elements


def merge_llm_results(
	essay: str,
	element_data: Dict[str, Any],
	linguistic_data: Dict[str, Any],
	holistic_data: Dict[str, Any],
) -> AnalysisResult:
	"""Validate the three LLM payloads and merge them into one result.

	Raises:
		UpstreamFormatError: if any payload does not fit its schema
	"""
	try:
		element_part = ElementAnalysis.model_validate(element_data)
		linguistic_part = LinguisticAnalysis.model_validate(linguistic_data)
		holistic_part = HolisticAssessment.model_validate(holistic_data)
	except ValidationError as err:
		raise UpstreamFormatError(f"LLM payload did not match the analysis schema: {err.error_count()} error(s)") from err

	recommendations = [r for r in holistic_part.recommendations if r.strip()][:RECOMMENDATION_COUNT]
	if len(recommendations) < RECOMMENDATION_COUNT:
		logger.debug("LLM returned %d recommendations; padding from score thresholds", len(recommendations))
		defaults = recommendations_for(holistic_part.holistic_score)
		recommendations.extend(defaults[len(recommendations):])

	return AnalysisResult(
		holistic_score=holistic_part.holistic_score,
		confidence=holistic_part.confidence,
		score_rationale=holistic_part.score_rationale,
		elements=attach_spans(essay, element_part.elements),
		linguistic_metrics=linguistic_part.linguistic_metrics,
		rubric_scores=holistic_part.rubric_scores,
		rubric_feedback=holistic_part.rubric_feedback,
		natural_language_summary=holistic_part.natural_language_summary,
		recommendations=recommendations,
	)
