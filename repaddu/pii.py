"""Redaction of personal data and secrets from text."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Optional, Pattern, Tuple

from .logger import log_warn


@dataclass(frozen=True)
class RedactionPattern:
    """A pattern to search for and what to replace each match with."""

    regex: Pattern[str]
    replacement: str
    name: str


DEFAULT_PATTERNS: Tuple[RedactionPattern, ...] = (
    RedactionPattern(
        re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b", re.ASCII),
        "<REDACTED:EMAIL>",
        "Email Address",
    ),
    RedactionPattern(
        re.compile(
            r"\b(?:(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)\.){3}"
            r"(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)\b",
            re.ASCII,
        ),
        "<REDACTED:IPV4>",
        "IPv4 Address",
    ),
    RedactionPattern(
        re.compile(r"ghp_[a-zA-Z0-9]{36}", re.ASCII),
        "<REDACTED:GITHUB_TOKEN>",
        "GitHub Token",
    ),
    RedactionPattern(
        re.compile(r"(?:AKIA|ASIA)[0-9A-Z]{16}", re.ASCII),
        "<REDACTED:AWS_KEY>",
        "AWS Access Key",
    ),
    RedactionPattern(
        re.compile(
            r"""(api_key|secret_key|auth_token)\s*[:=]\s*['"]([a-zA-Z0-9_\-]{20,})['"]""",
            re.ASCII,
        ),
        r'\1 = "<REDACTED:SECRET>"',
        "Generic Secret Assignment",
    ),
)


class PiiRedactor:
    """Replaces e-mail addresses, IPv4 addresses and common secrets."""

    def __init__(self, patterns: Optional[Iterable[RedactionPattern]] = None) -> None:
        self.patterns: Tuple[RedactionPattern, ...] = (
            tuple(patterns) if patterns is not None else DEFAULT_PATTERNS
        )

    def redact(self, text: str, file_path: str = "") -> str:
        """Return ``text`` with every pattern's matches replaced; log each find."""
        where = file_path or "content"
        result = text
        for pattern in self.patterns:
            found = sum(1 for _ in pattern.regex.finditer(result))
            if not found:
                continue
            for _ in range(found):
                log_warn(f"PII/Secret detected ({pattern.name}) in {where}")
            result = pattern.regex.sub(pattern.replacement, result)
        return result