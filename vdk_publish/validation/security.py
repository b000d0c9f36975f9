"""Best-effort pattern scan for secrets, code execution and suspicious links.

The keyword lists are fixed, so a clean scan is not a guarantee that the
content is safe.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum


class SecurityIssueKind(str, Enum):
    CREDENTIAL = "credential"
    EXECUTION = "execution"
    URL = "url"


@dataclass(frozen=True)
class SecurityPattern:
    kind: SecurityIssueKind
    pattern: re.Pattern[str]
    message: str


@dataclass(frozen=True)
class SecurityIssue:
    kind: SecurityIssueKind
    message: str
    occurrences: int

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class SecurityScanResult:
    issues: tuple[SecurityIssue, ...]

    @property
    def clean(self) -> bool:
        return not self.issues

    def messages(self) -> list[str]:
        return [issue.message for issue in self.issues]


def _credential(name: str, message: str) -> SecurityPattern:
    return SecurityPattern(
        kind=SecurityIssueKind.CREDENTIAL,
        pattern=re.compile(name + r"\s*[:=]\s*['\"]\w+['\"]", re.IGNORECASE),
        message=message,
    )


def _execution(pattern: str, message: str) -> SecurityPattern:
    return SecurityPattern(
        kind=SecurityIssueKind.EXECUTION,
        pattern=re.compile(pattern, re.IGNORECASE),
        message=message,
    )


def _url(pattern: str, message: str) -> SecurityPattern:
    return SecurityPattern(
        kind=SecurityIssueKind.URL,
        pattern=re.compile(pattern, re.IGNORECASE),
        message=message,
    )


_SHORTENED_URL = "Shortened URL detected - please use full URLs"

DEFAULT_PATTERNS: tuple[SecurityPattern, ...] = (
    _credential(r"api[_-]?key", "Potential API key detected"),
    _credential(r"secret", "Potential secret detected"),
    _credential(r"password", "Potential password detected"),
    _credential(r"token", "Potential token detected"),
    _execution(r"\beval\s*\(", "Use of eval() detected - potential security risk"),
    _execution(r"\bexec\s*\(", "Use of exec() detected - potential security risk"),
    _execution(r"\bsystem\s*\(", "Use of system() detected - potential security risk"),
    _execution(r"shell_exec", "Use of shell_exec detected - potential security risk"),
    _execution(r"\$\{[^}]*`", "Template literal with command execution detected"),
    _url(r"https?://[^/\s]*\.tk/", "Suspicious .tk domain detected"),
    _url(r"https?://bit\.ly/", _SHORTENED_URL),
    _url(r"https?://tinyurl\.", _SHORTENED_URL),
)


class SecurityScanner:
    def __init__(self, patterns: tuple[SecurityPattern, ...] = DEFAULT_PATTERNS) -> None:
        self._patterns = patterns

    def scan(self, content: str) -> SecurityScanResult:
        issues: list[SecurityIssue] = []
        for item in self._patterns:
            matches = item.pattern.findall(content)
            if matches:
                issues.append(
                    SecurityIssue(
                        kind=item.kind, message=item.message, occurrences=len(matches)
                    )
                )
        return SecurityScanResult(issues=tuple(issues))
