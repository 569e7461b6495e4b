from dataclasses import dataclass
from typing import Iterable, List


@dataclass(frozen=True)
class Issue:
    severity: str
    code: str
    message: str
    path: str = "/"


def issue_path(table: str, column: str = "") -> str:
    if column:
        return f"/{table}/{column}"
    return f"/{table}"


def has_errors(issues: Iterable[Issue]) -> bool:
    return any(issue.severity == "error" for issue in issues)


def by_code(issues: Iterable[Issue], code: str) -> List[Issue]:
    return [issue for issue in issues if issue.code == code]


def to_lines(issues: List[Issue]) -> List[str]:
    lines = []
    for issue in issues:
        lines.append(
            f"[{issue.severity.upper()}] {issue.code} {issue.path}: {issue.message}"
        )
    return lines
