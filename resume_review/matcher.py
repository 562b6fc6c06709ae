"""Naive keyword overlap between a resume and a job description."""
import math
import re
from dataclasses import dataclass, field
from typing import List

# Word characters are ASCII only: [A-Za-z0-9_]
_NON_WORD = re.compile(r"\W+", re.ASCII)

MIN_KEYWORD_LENGTH = 3
MAX_MISSING = 20


@dataclass(frozen=True)
class MatchResult:
    match_score: int
    missing: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"matchScore": self.match_score, "missing": list(self.missing)}


def tokenize(text: str) -> List[str]:
    return [token for token in _NON_WORD.split(text.lower()) if token]


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def match_keywords(resume_text: str, job_description: str) -> MatchResult:
    """Score how many job-description keywords appear in the resume.

    Job tokens shorter than three characters are ignored. Each remaining job
    token, duplicates included, is checked for membership in the resume's
    token set. The score is the rounded percentage found, held below 100
    while anything is missing. ``missing`` keeps the first twenty absent
    tokens in the order they were scanned.

    The cap below 100 departs from plain rounding: 199 of 200 found would
    round to 100, and a score of 100 must mean a complete match.
    """
    job_words = [w for w in tokenize(job_description) if len(w) >= MIN_KEYWORD_LENGTH]
    resume_words = set(tokenize(resume_text))

    missing = [w for w in job_words if w not in resume_words]

    if not job_words:
        score = 0
    else:
        score = _round_half_up((len(job_words) - len(missing)) / len(job_words) * 100)
        # 100 only when nothing is missing
        if missing:
            score = min(score, 99)

    return MatchResult(match_score=score, missing=missing[:MAX_MISSING])
