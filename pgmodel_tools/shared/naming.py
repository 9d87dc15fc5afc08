"""Naming utilities for code generation.

Short name segments are upper-cased only when they are a known initialism,
so `created_at` becomes `CreatedAt` rather than `CreatedAT`. Pass
`legacy_short_segments=True` to upper-case every segment of three characters
or fewer, as older generated files do.
"""

from __future__ import annotations

from functools import lru_cache

# Initialisms that must stay fully capitalized in generated Go identifiers.
# Corrections are applied in table order; keep it stable.
COMMON_INITIALISMS: tuple[str, ...] = (
    "ACL",
    "API",
    "ASCII",
    "CPU",
    "CSS",
    "DNS",
    "EOF",
    "GUID",
    "HTML",
    "HTTP",
    "HTTPS",
    "ID",
    "IP",
    "JSON",
    "LHS",
    "QPS",
    "RAM",
    "RHS",
    "RPC",
    "SLA",
    "SMTP",
    "SQL",
    "SSH",
    "TCP",
    "TLS",
    "TTL",
    "UDP",
    "UI",
    "UID",
    "UUID",
    "URI",
    "URL",
    "UTF8",
    "VM",
    "XML",
    "XMPP",
    "XSRF",
    "XSS",
)

_INITIALISM_SET: frozenset[str] = frozenset(COMMON_INITIALISMS)

SHORT_SEGMENT_LEN = 3


def _format_segment(segment: str, legacy_short_segments: bool) -> str:
    if len(segment) <= SHORT_SEGMENT_LEN:
        upper = segment.upper()
        if legacy_short_segments or upper in _INITIALISM_SET:
            return upper
    return segment[:1].upper() + segment[1:]


@lru_cache(maxsize=1024)
def to_go_name(value: str, legacy_short_segments: bool = False) -> str:
    """Convert a snake_case SQL identifier to an exported Go identifier.

    Uses caching for repeated calls with the same input.

    Short segments (three characters or fewer) are upper-cased when they are
    a known initialism; with ``legacy_short_segments`` every short segment is
    upper-cased. A leading or trailing initialism is then restored to its
    canonical spelling. Every check runs against the upper-cased draft as it
    was before any correction, so corrections never cascade.

    Examples:
        >>> to_go_name("user_id")
        'UserID'
        >>> to_go_name("http_url")
        'HTTPURL'
        >>> to_go_name("created_at")
        'CreatedAt'
        >>> to_go_name("created_at", legacy_short_segments=True)
        'CreatedAT'
    """
    draft = "".join(
        _format_segment(segment, legacy_short_segments)
        for segment in value.split("_")
        if segment
    )

    upper_draft = draft.upper()
    for initialism in COMMON_INITIALISMS:
        if upper_draft.endswith(initialism):
            draft = draft[: len(draft) - len(initialism)] + initialism
        elif upper_draft.startswith(initialism):
            draft = initialism + draft[len(initialism):]
    return draft
