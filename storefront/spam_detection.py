from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Optional

from .settings import DEFAULT_ALLOWED_HOSTS

SPAM_KEYWORDS = [
    "crypto",
    "bitcoin",
    "ethereum",
    "backlinks",
    "seo service",
    "marketing agency",
    "digital marketing",
    "increase traffic",
    "buy followers",
    "cheap viagra",
    "casino",
    "gambling",
    "loan",
    "debt",
    "investment opportunity",
    "make money fast",
    "work from home",
    "get rich quick",
]

URL_RE = re.compile(r"https?://\S+", re.IGNORECASE)
# Any non-line-break character followed by 10 more copies of itself
REPEATED_CHAR_RE = re.compile(r"([^\n\r\u2028\u2029])\1{10,}")
MAX_URLS = 2


@dataclass(frozen=True)
class SpamVerdict:
    is_spam: bool
    reason: Optional[str] = None

    def as_dict(self) -> dict:
        out = {"isSpam": self.is_spam}
        if self.reason:
            out["reason"] = self.reason
        return out


def detect_spam(text: str) -> SpamVerdict:
    lower = (text or "").lower()

    if len(URL_RE.findall(lower)) > MAX_URLS:
        return SpamVerdict(True, "too_many_urls")

    for keyword in SPAM_KEYWORDS:
        if keyword in lower:
            return SpamVerdict(True, "spam_keyword")

    if REPEATED_CHAR_RE.search(text or ""):
        return SpamVerdict(True, "repeated_characters")

    return SpamVerdict(False)


def validate_origin(
    origin: Optional[str],
    referer: Optional[str],
    allowed_hosts: Iterable[str] = DEFAULT_ALLOWED_HOSTS,
) -> bool:
    """Loose check that the request came from our own pages.

    Substring containment, not a parsed host comparison.
    """
    if not origin and not referer:
        return False
    hosts = list(allowed_hosts)
    for value in (origin, referer):
        if value and any(host in value for host in hosts):
            return True
    return False
