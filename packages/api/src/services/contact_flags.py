# This project was developed with assistance from AI tools.
"""Contact-information hints for admin reviewers.

Investors and founders are told that personal contact details will be
filtered out of their messages. The filtering itself is a human step: the
admin rewrites the text before approving it. These helpers only point the
reviewer at likely email addresses, phone numbers and links in the raw text;
nothing is redacted automatically.
"""

import re

CONTACT_INFO_WARNING = (
    "Personal contact information (emails, phone numbers, links) will be "
    "removed by an admin before your message is shared."
)

_EMAIL_RE = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")
_URL_RE = re.compile(r"(?:https?://|www\.)\S+", re.IGNORECASE)
# 7+ digits, optionally grouped by spaces, dots, dashes or parentheses
_PHONE_RE = re.compile(r"(?:\+?\d[\s().-]?){7,}\d")

_PATTERNS: dict[str, re.Pattern] = {
    "email": _EMAIL_RE,
    "url": _URL_RE,
    "phone": _PHONE_RE,
}


def detect_contact_info(text: str | None) -> list[str]:
    """Return the sorted kinds of contact info found in ``text``."""
    if not text:
        return []
    return sorted(kind for kind, pattern in _PATTERNS.items() if pattern.search(text))
