from __future__ import annotations

from typing import Optional, Sequence, Tuple

from .schemas import ArgumentElement, ArgumentElements, Effectiveness, TextSpan


LEAD_EFFECTIVE_MIN_CHARS = 500
POSITION_WINDOW = 100

POSITION_TRIGGERS = ("In my opinion", "I believe")
CLAIM_TRIGGERS = ("Firstly", "First")
CLAIM_FOLLOW_UPS = ("Secondly", "Furthermore")
EVIDENCE_TRIGGERS = ("For example", "For instance")
COUNTERCLAIM_TRIGGERS = ("However", "On the other hand")
REBUTTAL_TRIGGERS = ("Nevertheless", "Despite this")
CONCLUSION_TRIGGERS = ("In conclusion", "To conclude")

# (indirect feedback, reflection prompt) per role
_COACHING = {
	"lead": ("How effectively does your opening engage the reader?", "What makes an introduction compelling?"),
	"position": ("Is your position clearly stated?", "How does a clear thesis guide your reader?"),
	"claims": ("Are your main arguments clearly identifiable?", "How do your claims support your overall position?"),
	"evidence": ("What types of evidence strengthen your arguments?", "How effectively do your examples support your claims?"),
	"counterclaim": ("How well do you address opposing arguments?", "Why is it important to acknowledge counterarguments?"),
	"rebuttal": ("How do you respond to opposing viewpoints?", "What makes your rebuttal convincing?"),
	"conclusion": ("Does your conclusion effectively wrap up your argument?", "How can you make your conclusion more memorable?"),
}

# (feedback when found, feedback when not found)
_FEEDBACK = {
	"position": (
		"Clear position statement identified.",
		"No clear position statement found. Make sure to state your opinion clearly.",
	),
	"claims": (
		"Your essay presents main arguments. Consider developing them further with more detailed explanations.",
		"Your essay presents main arguments. Consider developing them further with more detailed explanations.",
	),
	"evidence": (
		"Good use of examples. Try to include more specific and varied evidence.",
		"Add specific examples and evidence to support your claims.",
	),
	"counterclaim": (
		"Good acknowledgment of opposing views.",
		"Consider acknowledging opposing viewpoints to strengthen your argument.",
	),
	"rebuttal": (
		"You respond to opposing views. Consider strengthening your rebuttal.",
		"Add a rebuttal to counter opposing arguments.",
	),
	"conclusion": (
		"Conclusion present. Consider making it more impactful.",
		"Add a strong conclusion to summarize your arguments.",
	),
}

LEAD_FEEDBACK = (
	"Your opening sentence introduces the topic. Consider making it more engaging "
	"to capture the reader's attention."
)


def find_first(essay: str, triggers: Sequence[str]) -> Optional[int]:
	"""Index of the first trigger (in list order) present in the essay."""
	for trigger in triggers:
		idx = essay.find(trigger)
		if idx != -1:
			return idx
	return None


def sentence_span(essay: str, start: int) -> TextSpan:
	stop = essay.find(".", start)
	end = len(essay) if stop == -1 else stop + 1
	return TextSpan(start=start, end=end)


def _element(role: str, span: Optional[TextSpan], text: str, found: Effectiveness, absent: Effectiveness) -> ArgumentElement:
	indirect, reflection = _COACHING[role]
	hit_feedback, miss_feedback = _FEEDBACK[role]
	if span is None:
		return ArgumentElement(
			text="",
			effectiveness=absent,
			feedback=miss_feedback,
			indirect_feedback=indirect,
			reflection_prompt=reflection,
		)
	return ArgumentElement(
		text=text,
		effectiveness=found,
		feedback=hit_feedback,
		indirect_feedback=indirect,
		reflection_prompt=reflection,
		span=span,
	)


def _sentence_element(essay: str, role: str, triggers: Sequence[str], found: Effectiveness, absent: Effectiveness) -> ArgumentElement:
	idx = find_first(essay, triggers)
	if idx is None:
		return _element(role, None, "", found, absent)
	span = sentence_span(essay, idx)
	return _element(role, span, essay[span.start:span.end], found, absent)


def detect_lead(essay: str) -> ArgumentElement:
	# A lead is always assumed present: everything before the first period
	first = essay.split(".")[0]
	indirect, reflection = _COACHING["lead"]
	return ArgumentElement(
		# Without any period the whole essay is the lead, as written
		text=first + "." if "." in essay else essay,
		effectiveness=Effectiveness.EFFECTIVE if len(essay) > LEAD_EFFECTIVE_MIN_CHARS else Effectiveness.ADEQUATE,
		feedback=LEAD_FEEDBACK,
		indirect_feedback=indirect,
		reflection_prompt=reflection,
		span=TextSpan(start=0, end=min(len(first) + 1, len(essay))),
	)


def detect_position(essay: str) -> ArgumentElement:
	idx = find_first(essay, POSITION_TRIGGERS)
	if idx is None:
		return _element("position", None, "", Effectiveness.EFFECTIVE, Effectiveness.MISSING)
	window = essay[idx:idx + POSITION_WINDOW]
	span = TextSpan(start=idx, end=idx + len(window))
	return _element("position", span, window + "...", Effectiveness.EFFECTIVE, Effectiveness.MISSING)


def detect_claims(essay: str) -> ArgumentElement:
	rating = Effectiveness.ADEQUATE
	if find_first(essay, CLAIM_TRIGGERS) is not None and find_first(essay, CLAIM_FOLLOW_UPS) is not None:
		rating = Effectiveness.EFFECTIVE
	return _sentence_element(essay, "claims", CLAIM_TRIGGERS, rating, Effectiveness.ADEQUATE)


def detect_evidence(essay: str) -> ArgumentElement:
	# Never rated Effective here, and absence is Ineffective rather than Missing
	return _sentence_element(essay, "evidence", EVIDENCE_TRIGGERS, Effectiveness.ADEQUATE, Effectiveness.INEFFECTIVE)


def detect_conclusion(essay: str) -> ArgumentElement:
	idx = -1
	for trigger in CONCLUSION_TRIGGERS:
		idx = essay.rfind(trigger)
		if idx != -1:
			break
	if idx == -1:
		return _element("conclusion", None, "", Effectiveness.ADEQUATE, Effectiveness.MISSING)
	span = TextSpan(start=idx, end=len(essay))
	return _element("conclusion", span, essay[idx:], Effectiveness.ADEQUATE, Effectiveness.MISSING)


def detect_elements(essay: str) -> ArgumentElements:
	"""Locate and rate the seven argumentative roles by trigger phrases."""
	return ArgumentElements(
		lead=detect_lead(essay),
		position=detect_position(essay),
		claims=[detect_claims(essay)],
		evidence=[detect_evidence(essay)],
		counterclaim=_sentence_element(
			essay, "counterclaim", COUNTERCLAIM_TRIGGERS, Effectiveness.EFFECTIVE, Effectiveness.MISSING
		),
		rebuttal=_sentence_element(
			essay, "rebuttal", REBUTTAL_TRIGGERS, Effectiveness.ADEQUATE, Effectiveness.MISSING
		),
		conclusion=detect_conclusion(essay),
	)


def locate_span(essay: str, text: str, search_from: int = 0) -> Tuple[Optional[TextSpan], int]:
	"""Find ``text`` in the essay at or after ``search_from``.

	A trailing ellipsis is ignored, and when nothing turns up after
	``search_from`` the whole essay is searched. Returns the span (or None)
	and the offset the next search should start from.
	"""
	needle = text.strip()
	if needle.endswith("..."):
		needle = needle[:-3].rstrip()
	if not needle:
		return None, search_from
	idx = essay.find(needle, search_from)
	if idx == -1:
		idx = essay.find(needle)
	if idx == -1:
		return None, search_from
	end = idx + len(needle)
	return TextSpan(start=idx, end=end), end
