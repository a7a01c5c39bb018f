"""
Intake forms: questionnaire files and the field parsers used when registering people.

A questionnaire file alternates a response key line with its prompt line. A
qualification questionnaire alternates the required answer ("NO", anything else
meaning yes) with its prompt.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import List, Sequence, Tuple

from .config import DAY_NAMES


class QuestionnaireFormatError(ValueError):
    """A questionnaire file lost a line (odd number of lines)."""


@dataclass(frozen=True)
class Question:
    key: str
    prompt: str


@dataclass(frozen=True)
class QualificationQuestion:
    required_answer: bool
    prompt: str


def _pairs(path: Path) -> List[Tuple[str, str]]:
    lines = Path(path).read_text(encoding="utf-8").splitlines()
    while lines and not lines[-1].strip():
        lines.pop()
    if len(lines) % 2:
        raise QuestionnaireFormatError(f"{path} has an odd number of lines; a question may have been lost")
    return [(lines[i].strip(), lines[i + 1].strip()) for i in range(0, len(lines), 2)]


def load_questionnaire(path: Path) -> List[Question]:
    return [Question(key=key, prompt=prompt) for key, prompt in _pairs(path)]


def load_qualification(path: Path) -> List[QualificationQuestion]:
    return [
        QualificationQuestion(required_answer=asserted != "NO", prompt=prompt)
        for asserted, prompt in _pairs(path)
    ]


def is_qualified(questions: Sequence[QualificationQuestion], answers: Sequence[bool]) -> bool:
    if len(questions) != len(answers):
        raise ValueError(f"expected {len(questions)} answers, got {len(answers)}")
    return all(q.required_answer == answer for q, answer in zip(questions, answers))


_YES = {"y", "yes", "t"}
_NO = {"n", "no", "f"}


def parse_yes_no(text: str) -> bool:
    value = text.strip().lower()
    if value.endswith(".") and value[:-1] in {"y", "yes", "n", "no"}:
        value = value[:-1]
    if value in _YES:
        return True
    if value in _NO:
        return False
    raise ValueError(f"{text!r} is not a yes/no answer")


def parse_date(text: str) -> date:
    """Parse MM/DD/YYYY (or MM.DD.YYYY)."""
    value = text.strip()
    if len(value) == 10 and value[2] in "/." and value[5] in "/.":
        try:
            return date(int(value[6:]), int(value[:2]), int(value[3:5]))
        except ValueError:
            pass
    raise ValueError(f"{text!r} is not a valid MM/DD/YYYY date")


def parse_weekday(text: str) -> int:
    names = [name.lower() for name in DAY_NAMES]
    value = text.strip().lower()
    if value not in names:
        raise ValueError(f"{text!r} is not a day of the week")
    return names.index(value)


def probable_phone(text: str) -> str:
    value = text.strip()
    if value.upper() == "N/A":
        return "N/A"
    if len(value) >= 7 and any(ch.isdigit() for ch in value):
        return value
    raise ValueError(f"{text!r} does not look like a phone number")


def probable_email(text: str) -> str:
    value = text.strip()
    if value.upper() == "N/A":
        return "N/A"
    at, dot = value.find("@"), value.rfind(".")
    if len(value) >= 7 and at != -1 and dot != -1 and at < dot:
        return value
    raise ValueError(f"{text!r} does not look like an email address")
