"""
Credential Scanner - regex-based secret detection

Scans documentation text line by line for probable credentials (usernames,
passwords, API keys, client ids/secrets, tokens, authorization headers).
Each hit is cleaned, classified as real or placeholder, scored, masked and
de-duplicated on (type, masked value).

Usage:
    from credentials import CredentialScanner

    for match in CredentialScanner().scan(text):
        print(match.label, match.value, match.confidence)
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable

from .models import CredentialMatch, CredentialType

logger = logging.getLogger(__name__)

MAX_SOURCE_LINE = 160

# Free text "key: value" / "key=value" and quoted JSON "key": "value"
_FREE_VALUE = r"\s*[:=]\s*(?P<value>[^,\s;]+)"
_QUOTED_VALUE = r'"\s*:\s*"(?P<value>[^"]+)"'

PLACEHOLDER_TOKENS = frozenset({
    "string",
    "integer",
    "number",
    "boolean",
    "true",
    "false",
    "null",
    "password",
    "pass",
    "username",
    "user",
    "token",
    "api_key",
    "apikey",
    "client_id",
    "client_secret",
    "example",
    "sample",
    "placeholder",
})

_YOUR_PREFIX = re.compile(r"^your[_-]")
_MASK_RUN = re.compile(r"^[x*]{3,}$")
_BRACKETED = re.compile(r"^[<\[]?.+[>\]]?$")


@dataclass(frozen=True)
class CredentialPattern:
    type: CredentialType
    label: str
    regex: re.Pattern


def _pattern(kind: CredentialType, label: str, expression: str) -> CredentialPattern:
    return CredentialPattern(kind, label, re.compile(expression, re.IGNORECASE))


PATTERNS: tuple[CredentialPattern, ...] = (
    _pattern(CredentialType.USERNAME, "Username", r"\buser(?:name)?\b" + _FREE_VALUE),
    _pattern(CredentialType.USERNAME, "Username", r'"user(?:name)?' + _QUOTED_VALUE),
    _pattern(CredentialType.PASSWORD, "Password", r"\bpass(?:word)?\b" + _FREE_VALUE),
    _pattern(CredentialType.PASSWORD, "Password", r'"pass(?:word)?' + _QUOTED_VALUE),
    _pattern(CredentialType.API_KEY, "API key", r"\b(?:api[\s_-]?key|x-api-key)\b" + _FREE_VALUE),
    _pattern(CredentialType.API_KEY, "API key", r'"api[_-]?key' + _QUOTED_VALUE),
    _pattern(CredentialType.CLIENT_ID, "Client ID", r"\bclient[\s_-]?id\b" + _FREE_VALUE),
    _pattern(CredentialType.CLIENT_ID, "Client ID", r'"client[_-]?id' + _QUOTED_VALUE),
    _pattern(CredentialType.CLIENT_SECRET, "Client secret", r"\bclient[\s_-]?secret\b" + _FREE_VALUE),
    _pattern(CredentialType.CLIENT_SECRET, "Client secret", r'"client[_-]?secret' + _QUOTED_VALUE),
    _pattern(CredentialType.TOKEN, "Token", r"\baccess[\s_-]?token\b" + _FREE_VALUE),
    _pattern(CredentialType.TOKEN, "Token", r'"access[_-]?token' + _QUOTED_VALUE),
    _pattern(CredentialType.TOKEN, "Token", r"\btoken\b" + _FREE_VALUE),
    _pattern(CredentialType.TOKEN, "Token", r'"token' + _QUOTED_VALUE),
    _pattern(
        CredentialType.AUTHORIZATION,
        "Authorization bearer",
        r"\bauthorization\b\s*:\s*bearer\s+(?P<value>[A-Za-z0-9\-_.=]+)",
    ),
    _pattern(
        CredentialType.AUTHORIZATION,
        "Authorization basic",
        r"\bauthorization\b\s*:\s*basic\s+(?P<value>[A-Za-z0-9+/=]+)",
    ),
)


class CredentialScanner:
    """
    Finds probable secrets in free text.

    The scan never raises: malformed or empty input simply produces no
    matches.
    """

    def __init__(self, patterns: Iterable[CredentialPattern] = PATTERNS):
        self.patterns = tuple(patterns)

    def scan(self, text: str) -> list[CredentialMatch]:
        """
        Scan text for credentials.

        Args:
            text: Any text; lines may use any newline convention.

        Returns:
            Matches in order of first appearance, one per (type, masked value).
        """
        matches: list[CredentialMatch] = []
        seen: set[tuple[CredentialType, str]] = set()

        for line in (text or "").splitlines():
            line = line.strip()
            if not line:
                continue

            hits: list[tuple[CredentialPattern, str]] = []
            for pattern in self.patterns:
                for found in pattern.regex.finditer(line):
                    raw_value = sanitize_value(found.group("value") or "")
                    if raw_value:
                        hits.append((pattern, raw_value))
            if not hits:
                continue

            # Every secret on the line is masked before any match keeps it
            masked_line = line
            for raw_value in sorted({value for _, value in hits}, key=lambda value: (-len(value), value)):
                masked_line = masked_line.replace(raw_value, mask_value(raw_value))
            source_line = clip_line(masked_line)

            for pattern, raw_value in hits:
                masked = mask_value(raw_value)
                fingerprint = (pattern.type, masked)
                if fingerprint in seen:
                    continue
                seen.add(fingerprint)

                placeholder = is_placeholder(raw_value)
                matches.append(CredentialMatch(
                    type=pattern.type,
                    label=pattern.label,
                    value=masked,
                    raw_value=raw_value,
                    confidence=estimate_confidence(raw_value, placeholder),
                    is_placeholder=placeholder,
                    source_line=source_line,
                ))

        logger.debug(f"Credential scan found {len(matches)} match(es)")
        return matches


def summarize(matches: Iterable[CredentialMatch]) -> list[str]:
    """Distinct credential types backed by at least one non-placeholder value."""
    types: list[str] = []
    for match in matches:
        if match.is_placeholder or match.type.value in types:
            continue
        types.append(match.type.value)
    return types


def sanitize_value(value: str) -> str:
    """Strip surrounding whitespace, quotes, trailing punctuation and brackets."""
    value = value.strip()
    value = value.strip(" \t\n\r\0\x0b\"'`,;)")
    return value.strip("<>[]{}")


def mask_value(value: str) -> str:
    """Keep the first and last two characters; short values are fully masked."""
    value = value.strip()
    if len(value) <= 4:
        return "*" * len(value)
    return value[:2] + "*" * max(3, len(value) - 4) + value[-2:]


def clip_line(line: str) -> str:
    line = line.strip()
    if len(line) <= MAX_SOURCE_LINE:
        return line
    return line[: MAX_SOURCE_LINE - 3] + "..."


def is_placeholder(value: str) -> bool:
    """Whether the value looks like a documentation example, not a real secret."""
    normalized = value.strip().lower().strip("\"'`")

    if normalized in PLACEHOLDER_TOKENS:
        return True
    if _YOUR_PREFIX.match(normalized):
        return True
    if _MASK_RUN.match(normalized):
        return True
    if "..." in normalized and _BRACKETED.match(normalized):
        return True
    return False


def estimate_confidence(value: str, placeholder: bool) -> float:
    if placeholder:
        return 0.3
    if len(value) < 6:
        return 0.55
    if len(value) > 24:
        return 0.9
    return 0.75
