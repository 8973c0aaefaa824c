from __future__ import annotations

from dataclasses import dataclass

from .schemas import RubricScores
from .validation import count_words


BASE_SCORE = 5.0
RUBRIC_FLOOR = 4.0


@dataclass(frozen=True)
class HeuristicScore:
	holistic: float
	rubric: RubricScores
	word_count: int


def holistic_band(essay: str) -> float:
	"""Tiered band estimate from connective words and length.

	Tiers are checked in ascending order and the last one that matches wins.
	Matching is case-sensitive, so "However" does not satisfy the "however" tier.
	"""
	words = count_words(essay)
	score = BASE_SCORE
	if words >= 300 and "however" in essay and "conclusion" in essay:
		score = 6.5
	if words >= 400 and "furthermore" in essay and "In my opinion" in essay:
		score = 7.0
	if "Nevertheless" in essay or "Consequently" in essay:
		score = 7.5
	return score


def rubric_from_band(band: float) -> RubricScores:
	return RubricScores(
		task_achievement=band,
		coherence_cohesion=max(RUBRIC_FLOOR, band - 0.5),
		lexical_resource=max(RUBRIC_FLOOR, band - 0.3),
		grammatical_range=band + 0.2,
	)


def score_essay(essay: str) -> HeuristicScore:
	band = holistic_band(essay)
	return HeuristicScore(holistic=band, rubric=rubric_from_band(band), word_count=count_words(essay))
