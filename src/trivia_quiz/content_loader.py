"""Content Loader: Reads subjects, questions and facts from JSON or YAML."""

import json
import logging
from pathlib import Path
from typing import List

import yaml

from .errors import ContentError
from .models import Answer, Question, Subject, SubjectCatalog

logger = logging.getLogger(__name__)


def _parse_answer(raw, where: str) -> Answer:
    if isinstance(raw, str):
        return Answer(text=raw)
    if not isinstance(raw, dict) or not raw.get("text"):
        raise ContentError(f"{where}: answer needs a 'text' field")
    return Answer(text=str(raw["text"]), is_correct=bool(raw.get("correct", False)))


def _parse_question(raw, where: str) -> Question:
    if not isinstance(raw, dict) or not raw.get("question"):
        raise ContentError(f"{where}: question needs a 'question' field")
    answers = tuple(
        _parse_answer(a, f"{where}, answer {i + 1}")
        for i, a in enumerate(raw.get("answers") or [])
    )
    return Question(text=str(raw["question"]), answers=answers)


def parse_subject(raw: dict) -> Subject:
    """Build a Subject from a mapping."""
    if not isinstance(raw, dict):
        raise ContentError(f"Subject entry must be a mapping, got {type(raw).__name__}")
    subject_id = raw.get("id")
    name = raw.get("name")
    if not subject_id or not name:
        raise ContentError(f"Subject entry needs 'id' and 'name': {raw!r}")

    questions = tuple(
        _parse_question(q, f"{subject_id}, question {i + 1}")
        for i, q in enumerate(raw.get("questions") or [])
    )
    facts = tuple(
        str(f["fact"]) if isinstance(f, dict) else str(f)
        for f in raw.get("facts") or []
    )
    subject = Subject(
        subject_id=str(subject_id),
        name=str(name),
        questions=questions,
        facts=facts,
        sound_cue=raw.get("sound"),
    )
    ineligible = len(questions) - len(subject.eligible_questions())
    if ineligible:
        logger.warning(f"Subject '{subject_id}' has {ineligible} question(s) that can never be asked.")
    return subject


def parse_subjects(data) -> SubjectCatalog:
    if isinstance(data, dict):
        data = data.get("subjects")
    if not isinstance(data, list):
        raise ContentError("Content must be a list of subjects or have a 'subjects' list")
    subjects: List[Subject] = [parse_subject(raw) for raw in data]
    catalog = SubjectCatalog()
    for subject in subjects:
        if subject.subject_id in catalog:
            raise ContentError(f"Duplicate subject id: {subject.subject_id}")
        catalog.add(subject)
    return catalog


def load_subjects(path: str) -> SubjectCatalog:
    """Load a SubjectCatalog from a .json, .yaml or .yml file."""
    content_path = Path(path)
    try:
        with open(content_path, "r", encoding="utf-8") as f:
            if content_path.suffix.lower() == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except OSError as e:
        raise ContentError(f"Cannot read content file {content_path}: {e}") from e
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ContentError(f"Cannot parse content file {content_path}: {e}") from e

    catalog = parse_subjects(data)
    logger.info(f"Loaded {len(catalog)} subjects from {content_path}")
    return catalog
