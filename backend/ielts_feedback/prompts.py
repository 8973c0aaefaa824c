from __future__ import annotations

from .reference_data import ReferenceData


_ELEMENT_SHAPE = (
	'{"text": "exact text from the essay or empty string", '
	'"effectiveness": "Effective|Adequate|Ineffective|Missing", '
	'"feedback": "detailed feedback", '
	'"indirectFeedback": "indirect question", '
	'"reflectionPrompt": "reflection question"}'
)


def build_element_prompt(essay: str, task_prompt: str, reference: ReferenceData) -> str:
	return (
		"You are an expert IELTS Writing Task 2 assessor. Identify the argumentative elements of the essay "
		"below using the Crossley discourse model: Lead, Position, Claims, Evidence, Counterclaim, Rebuttal, Conclusion.\n\n"
		"Annotated training examples (discourse_text, discourse_type, discourse_effectiveness):\n"
		f"{reference.training_examples}\n\n"
		f'IELTS Task 2 Prompt:\n"{task_prompt}"\n\n'
		f'Essay to analyze:\n"{essay}"\n\n'
		"Rules:\n"
		"- Quote element text exactly as it appears in the essay; use an empty string when the element is absent.\n"
		"- An absent element MUST be rated Missing, and a Missing element MUST have empty text.\n"
		"- Claims and evidence are arrays in the order they appear in the essay.\n"
		"- Consider how well each element serves the specific prompt when rating it.\n\n"
		"Return ONLY a JSON object of this shape:\n"
		"{\"elements\": {"
		f"\"lead\": {_ELEMENT_SHAPE}, "
		f"\"position\": {_ELEMENT_SHAPE}, "
		f"\"claims\": [{_ELEMENT_SHAPE}], "
		f"\"evidence\": [{_ELEMENT_SHAPE}], "
		f"\"counterclaim\": {_ELEMENT_SHAPE}, "
		f"\"rebuttal\": {_ELEMENT_SHAPE}, "
		f"\"conclusion\": {_ELEMENT_SHAPE}"
		"}}"
	)


def build_linguistic_prompt(essay: str, task_prompt: str) -> str:
	return (
		"Analyze the linguistic features of this essay.\n\n"
		f'Prompt: "{task_prompt}"\n'
		f'Essay: "{essay}"\n\n'
		"Calculate and provide:\n"
		"1. Lexical Diversity (Type-Token Ratio): unique words / total words\n"
		"2. Academic Word Coverage: percentage of words from the Academic Word List\n"
		"3. Lexical Prevalence: average frequency score (lower = more sophisticated)\n"
		"4. C-unit Complexity: clauses per c-unit\n"
		"5. Verb Phrase Ratio: c-units per verb phrase\n"
		"6. Dependent Clause Ratio: dependent clauses / total clauses\n\n"
		"Return ONLY a JSON object:\n"
		'{"linguisticMetrics": {"lexicalDiversity": 0.65, "academicWordCoverage": 12.5, '
		'"lexicalPrevalence": 3.2, "cUnitComplexity": 1.4, "verbPhraseRatio": 1.2, "dependentClauseRatio": 0.35}}'
	)


def build_holistic_prompt(essay: str, task_prompt: str, reference: ReferenceData) -> str:
	return (
		"You are an IELTS examiner. Score the essay below against the official Task 2 criteria.\n\n"
		f"{reference.rubric_criteria}\n\n"
		"Annotated training examples for calibration:\n"
		f"{reference.training_examples}\n\n"
		f'IELTS Task 2 Prompt:\n"{task_prompt}"\n\n'
		f'Essay:\n"{essay}"\n\n'
		"Evaluate how well the essay addresses the specific prompt and task requirements. Provide:\n"
		"1. Overall band score (0-9, half bands allowed such as 6.5)\n"
		"2. Individual scores for each criterion\n"
		"3. Detailed feedback for each criterion\n"
		"4. A natural language summary that mirrors rubric language\n"
		"5. Exactly 3 recommendations for improvement\n"
		"6. Confidence level and rationale\n\n"
		"Return ONLY a JSON object:\n"
		'{"holisticScore": 6.5, "confidence": "High (85%)", "scoreRationale": "brief explanation of the overall score", '
		'"rubricScores": {"taskAchievement": 6.0, "coherenceCohesion": 6.5, "lexicalResource": 6.0, "grammaticalRange": 7.0}, '
		'"rubricFeedback": {"taskAchievement": "...", "coherenceCohesion": "...", "lexicalResource": "...", "grammaticalRange": "..."}, '
		'"naturalLanguageSummary": "...", '
		'"recommendations": ["specific recommendation 1", "specific recommendation 2", "specific recommendation 3"]}'
	)
