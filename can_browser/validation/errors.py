from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class ValidationIssue:
    code: str
    message: str


class ValidationError(Exception):
    def __init__(self, issues: list[ValidationIssue]):
        self.issues = issues
        super().__init__("\n".join(f"{i.code}: {i.message}" for i in issues))


def summarise_issues(issues: Iterable[ValidationIssue]) -> str:
    """One-line 'CODE xN' summary, most frequent first."""
    counts = Counter(issue.code for issue in issues)
    return ", ".join(f"{code} x{n}" for code, n in counts.most_common())
