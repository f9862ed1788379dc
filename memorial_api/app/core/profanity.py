"""
Guestbook profanity filter.

Matching is a plain case-insensitive substring test against a fixed
list of Thai and English terms.  There are no word-boundary checks,
so e.g. ``"sus"`` also rejects ``"suspense"``.
"""

from typing import Iterable, Optional

BANNED_WORDS = (
    "kuy", "sus", "fuck", "shit", "bitch", "asshole",
    "ควย", "สัส", "เหี้ย", "เย็ด", "มึง", "กู", "แม่ง", "ดอกทอง", "ร่าน", "ตอแหล",
    "พ่อมึงตาย", "แม่มึงตาย",
)


def contains_profanity(text: Optional[str], banned: Iterable[str] = BANNED_WORDS) -> bool:
    """Return ``True`` if ``text`` contains any banned term."""
    if not text:
        return False
    lowered = text.lower()
    return any(word in lowered for word in banned)
