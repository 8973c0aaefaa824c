from __future__ import annotations
from functools import lru_cache

from fastapi import APIRouter, Depends

from ..analyzer import EssayAnalyzer
from ..schemas import AnalysisResult, EssaySubmission


router = APIRouter(prefix="/api", tags=["analysis"])


@lru_cache(maxsize=1)
def get_analyzer() -> EssayAnalyzer:
	return EssayAnalyzer()


@router.post("/analyze-essay", response_model=AnalysisResult)
async def analyze_essay(req: EssaySubmission, analyzer: EssayAnalyzer = Depends(get_analyzer)):
	"""Score an IELTS Task 2 essay.

	Validation failures surface as HTTP 400 ``{"error": ...}`` (see the
	handler in ``main``); LLM failures are answered with the heuristic result.
	"""
	return await analyzer.analyze(req)
