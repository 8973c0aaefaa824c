"""
Essay analysis service
======================

Runs the three LLM analyses (argumentative elements, linguistic metrics,
holistic band) concurrently and merges them into one AnalysisResult. Any
upstream failure (missing key, transport error, malformed JSON, payload that
does not fit the schema) is logged and answered with the deterministic
heuristic analysis instead, so callers always receive the same result shape.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

from .assembler import merge_llm_results
from .errors import UpstreamFormatError
from .fallback import build_fallback_analysis
from .gemini_client import GeminiClient
from .prompts import build_element_prompt, build_holistic_prompt, build_linguistic_prompt
from .reference_data import ReferenceData, default_reference_data
from .schemas import AnalysisResult, EssaySubmission
from .settings import Settings, settings
from .validation import validate_submission


logger = logging.getLogger(__name__)

ELEMENT_TEMPERATURE = 0.3
LINGUISTIC_TEMPERATURE = 0.1
HOLISTIC_TEMPERATURE = 0.2


def extract_json_object(text: str) -> Dict[str, Any]:
	"""Parse the first balanced ``{...}`` region of an LLM response.

	Braces inside JSON strings are ignored while balancing, so code fences,
	prose before the object and trailing commentary are all tolerated.

	Raises:
		UpstreamFormatError: if no balanced object parses as a JSON object
	"""
	try:
		data = json.loads(text)
		if isinstance(data, dict):
			return data
	except (TypeError, ValueError):
		pass
	start = (text or "").find("{")
	if start == -1:
		raise UpstreamFormatError("LLM response contained no JSON object", raw=text)
	depth = 0
	in_string = False
	escaped = False
	for i in range(start, len(text)):
		ch = text[i]
		if in_string:
			if escaped:
				escaped = False
			elif ch == "\\":
				escaped = True
			elif ch == '"':
				in_string = False
			continue
		if ch == '"':
			in_string = True
		elif ch == "{":
			depth += 1
		elif ch == "}":
			depth -= 1
			if depth == 0:
				candidate = text[start:i + 1]
				try:
					data = json.loads(candidate)
				except ValueError as err:
					raise UpstreamFormatError(f"LLM returned malformed JSON: {err}", raw=text) from err
				if not isinstance(data, dict):
					raise UpstreamFormatError("LLM JSON was not an object", raw=text)
				return data
	raise UpstreamFormatError("LLM response contained an unterminated JSON object", raw=text)


async def gather_all(*calls: Awaitable[str]) -> List[str]:
	"""Await every call; on the first failure (or cancellation) cancel the rest."""
	tasks = [asyncio.ensure_future(c) for c in calls]
	try:
		return list(await asyncio.gather(*tasks))
	except BaseException:
		for task in tasks:
			task.cancel()
		await asyncio.gather(*tasks, return_exceptions=True)
		raise


class EssayAnalyzer:
	"""Analyse essays with the LLM, falling back to heuristics on any failure."""

	def __init__(
		self,
		reference: Optional[ReferenceData] = None,
		*,
		config: Optional[Settings] = None,
		client_factory: Optional[Callable[[], GeminiClient]] = None,
	) -> None:
		self.config = config or settings
		self.reference = reference or default_reference_data()
		self._client_factory = client_factory or (lambda: GeminiClient(config=self.config))

	async def analyze(self, submission: EssaySubmission) -> AnalysisResult:
		"""Validate and analyse one submission.

		Raises:
			EssayValidationError: before any analysis runs, for unusable input
		"""
		essay, prompt = validate_submission(
			submission.essay,
			submission.prompt,
			min_words=self.config.essay_min_words,
		)
		if not self.config.llm_configured:
			logger.info("No LLM credential configured; using heuristic analysis")
			return build_fallback_analysis(essay, prompt)
		try:
			return await self._analyze_with_llm(essay, prompt)
		except Exception as err:
			logger.warning("LLM analysis failed (%s: %s); using heuristic analysis", type(err).__name__, err)
			raw = getattr(err, "raw", None)
			if raw:
				logger.debug("Raw LLM output: %.500s", raw)
			return build_fallback_analysis(essay, prompt)

	async def _analyze_with_llm(self, essay: str, prompt: str) -> AnalysisResult:
		client = self._client_factory()
		try:
			element_raw, linguistic_raw, holistic_raw = await gather_all(
				client.generate(
					build_element_prompt(essay, prompt, self.reference),
					temperature=ELEMENT_TEMPERATURE,
				),
				client.generate(
					build_linguistic_prompt(essay, prompt),
					temperature=LINGUISTIC_TEMPERATURE,
					thinking_budget=0,
				),
				client.generate(
					build_holistic_prompt(essay, prompt, self.reference),
					temperature=HOLISTIC_TEMPERATURE,
				),
			)
		finally:
			await client.aclose()
		return merge_llm_results(
			essay,
			extract_json_object(element_raw),
			extract_json_object(linguistic_raw),
			extract_json_object(holistic_raw),
		)
