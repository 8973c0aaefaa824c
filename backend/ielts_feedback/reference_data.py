from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from .settings import settings


DATA_DIR = Path(__file__).resolve().parent / "data"
TRAINING_EXAMPLES_FILE = "training_examples.txt"
RUBRIC_CRITERIA_FILE = "rubric_criteria.txt"


@dataclass(frozen=True)
class ReferenceData:
	"""Few-shot examples and rubric descriptors embedded in LLM prompts."""

	training_examples: str
	rubric_criteria: str


def _read(directory: Path, name: str) -> str:
	# Files missing from an override directory fall back to the packaged copy
	path = directory / name
	if not path.is_file():
		path = DATA_DIR / name
	return path.read_text(encoding="utf-8").strip()


@lru_cache(maxsize=4)
def load_reference_data(directory: Optional[str] = None) -> ReferenceData:
	base = Path(directory) if directory else DATA_DIR
	return ReferenceData(
		training_examples=_read(base, TRAINING_EXAMPLES_FILE),
		rubric_criteria=_read(base, RUBRIC_CRITERIA_FILE),
	)


def default_reference_data() -> ReferenceData:
	return load_reference_data(settings.reference_data_dir)
