from __future__ import annotations

import math
import re
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
	# camelCase on the wire (the React UI contract), snake_case accepted too
	model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Effectiveness(str, Enum):
	EFFECTIVE = "Effective"
	ADEQUATE = "Adequate"
	INEFFECTIVE = "Ineffective"
	MISSING = "Missing"


_EFFECTIVENESS_BY_NAME = {e.value.lower(): e for e in Effectiveness}


class EssaySubmission(BaseModel):
	# Optional so that absent fields reach the validator and get its message
	essay: Optional[str] = None
	prompt: Optional[str] = None
	mode: str = "comprehensive"


class TextSpan(BaseModel):
	start: int = Field(ge=0)
	end: int = Field(ge=0)


class ArgumentElement(_CamelModel):
	text: str = ""
	effectiveness: Effectiveness = Effectiveness.MISSING
	feedback: str = ""
	indirect_feedback: str = ""
	reflection_prompt: str = ""
	span: Optional[TextSpan] = None

	@field_validator("text", "feedback", "indirect_feedback", "reflection_prompt", mode="before")
	@classmethod
	def _none_to_empty(cls, value: Any) -> Any:
		if value is None:
			return ""
		return value

	@field_validator("effectiveness", mode="before")
	@classmethod
	def _match_rating(cls, value: Any) -> Any:
		if isinstance(value, str):
			return _EFFECTIVENESS_BY_NAME.get(value.strip().lower(), value)
		return value


# Roles whose rating must be Missing exactly when nothing was extracted
PAIRED_ROLES: Tuple[str, ...] = ("position", "counterclaim", "rebuttal", "conclusion")

_ROLE_ALIASES = {
	"concluding statement": "conclusion",
	"counter claim": "counterclaim",
}
# Singleton roles, optionally plural and/or numbered ("Counterclaims", "rebuttal 2")
_SINGLETON_KEY = re.compile(r"(lead|position|counter ?claim|rebuttal|conclusion|concluding statement)s?(?: \d+)?")
_SEQUENCE_KEY = re.compile(r"(claim|evidence)s?(?: (\d+))?")


def _normalize_key(raw_key: Any) -> str:
	key = " ".join(str(raw_key).replace("_", " ").split()).lower()
	match = _SINGLETON_KEY.fullmatch(key)
	if match:
		role = match.group(1)
		return _ROLE_ALIASES.get(role, role)
	return key


class ArgumentElements(_CamelModel):
	lead: ArgumentElement
	position: ArgumentElement = Field(default_factory=ArgumentElement)
	claims: List[ArgumentElement] = Field(default_factory=list)
	evidence: List[ArgumentElement] = Field(default_factory=list)
	counterclaim: ArgumentElement = Field(default_factory=ArgumentElement)
	rebuttal: ArgumentElement = Field(default_factory=ArgumentElement)
	conclusion: ArgumentElement = Field(default_factory=ArgumentElement)

	@model_validator(mode="before")
	@classmethod
	def _normalize_shape(cls, data: Any) -> Any:
		"""Fold the legacy LLM shapes into the canonical one.

		Accepts ``claims``/``evidence`` as a list or a single object, numbered
		keys such as ``"claim 2 "`` and ``"Concluding Statement"``.
		"""
		if not isinstance(data, dict):
			return data
		normalized: Dict[str, Any] = {}
		sequences: Dict[str, List[Tuple[int, int, Any]]] = {"claims": [], "evidence": []}
		seq = 0
		for raw_key, value in data.items():
			key = _normalize_key(raw_key)
			match = _SEQUENCE_KEY.fullmatch(key)
			if not match:
				# First occurrence of a singleton role wins
				if isinstance(value, list):
					value = value[0] if value else None
				if value is not None:
					normalized.setdefault(key, value)
				continue
			role = "claims" if match.group(1) == "claim" else "evidence"
			order = int(match.group(2)) if match.group(2) else 0
			items = value if isinstance(value, list) else [value]
			for item in items:
				if item is None:
					continue
				sequences[role].append((order, seq, item))
				seq += 1
		for role, entries in sequences.items():
			if entries:
				normalized[role] = [item for _, _, item in sorted(entries, key=lambda e: (e[0], e[1]))]
		return normalized

	@model_validator(mode="after")
	def _missing_iff_empty(self) -> "ArgumentElements":
		for role in PAIRED_ROLES:
			element: ArgumentElement = getattr(self, role)
			if not element.text.strip():
				element.effectiveness = Effectiveness.MISSING
		# A Missing rating never carries text, for every role
		for _, element in self.located():
			if element.effectiveness is Effectiveness.MISSING:
				element.text = ""
				element.span = None
		return self

	def located(self) -> List[Tuple[str, ArgumentElement]]:
		"""Elements in essay order of their roles, claims/evidence expanded."""
		out: List[Tuple[str, ArgumentElement]] = [("lead", self.lead), ("position", self.position)]
		out.extend(("claims", c) for c in self.claims)
		out.extend(("evidence", e) for e in self.evidence)
		for role in ("counterclaim", "rebuttal", "conclusion"):
			out.append((role, getattr(self, role)))
		return out


class LinguisticMetrics(_CamelModel):
	lexical_diversity: float = Field(ge=0.0, le=1.0)
	academic_word_coverage: float = Field(ge=0.0)
	lexical_prevalence: float = Field(gt=0.0)
	c_unit_complexity: float = Field(ge=0.0)
	verb_phrase_ratio: float = Field(ge=0.0)
	dependent_clause_ratio: float = Field(ge=0.0, le=1.0)


def half_band(score: float) -> float:
	"""Round to the nearest half band; quarters round up as IELTS does (6.25 -> 6.5)."""
	return math.floor(score * 2 + 0.5) / 2


class RubricScores(_CamelModel):
	task_achievement: float = Field(ge=0.0, le=9.0)
	coherence_cohesion: float = Field(ge=0.0, le=9.0)
	lexical_resource: float = Field(ge=0.0, le=9.0)
	grammatical_range: float = Field(ge=0.0, le=9.0)


class RubricFeedback(_CamelModel):
	task_achievement: str = ""
	coherence_cohesion: str = ""
	lexical_resource: str = ""
	grammatical_range: str = ""


class AnalysisResult(_CamelModel):
	holistic_score: float = Field(ge=0.0, le=9.0)
	confidence: str
	score_rationale: str
	elements: ArgumentElements
	linguistic_metrics: LinguisticMetrics
	rubric_scores: RubricScores
	rubric_feedback: RubricFeedback
	natural_language_summary: str
	recommendations: List[str]


# ---- LLM payloads (one per analysis call) ----

class ElementAnalysis(_CamelModel):
	elements: ArgumentElements


class LinguisticAnalysis(_CamelModel):
	linguistic_metrics: LinguisticMetrics


class HolisticAssessment(_CamelModel):
	holistic_score: float = Field(ge=0.0, le=9.0)
	confidence: str = ""
	score_rationale: str = ""
	rubric_scores: RubricScores
	rubric_feedback: RubricFeedback = Field(default_factory=RubricFeedback)
	natural_language_summary: str = ""
	recommendations: List[str] = Field(default_factory=list)

	@field_validator("confidence", mode="before")
	@classmethod
	def _confidence_as_text(cls, value: Any) -> Any:
		if value is None:
			return ""
		if isinstance(value, (int, float)):
			return f"{value:g}%"
		return value

	@field_validator("recommendations", mode="before")
	@classmethod
	def _recommendations_as_list(cls, value: Any) -> Any:
		if value is None:
			return []
		if isinstance(value, str):
			return [line.strip(" -•\t") for line in value.splitlines() if line.strip(" -•\t")]
		return value

	@field_validator("holistic_score")
	@classmethod
	def _round_holistic(cls, value: float) -> float:
		return half_band(value)

	@field_validator("rubric_scores")
	@classmethod
	def _round_rubric(cls, value: RubricScores) -> RubricScores:
		return RubricScores(**{name: half_band(score) for name, score in value.model_dump().items()})
