"""
text_cleaning.py — Normalising free text before it goes into a prompt.

User input is pasted resumes and job descriptions: arbitrary Unicode
punctuation, emoji, stray control characters. Anything outside a small
allowed set becomes a space, whitespace runs collapse, and the result is
trimmed. Routes may allow a few extra characters (e.g. "@+#" so emails and
"C++" / "C#" survive in resumes).
"""

import re

_BASE_ALLOWED = r"\w\s\-.,;:()\[\]{}"
_WHITESPACE = re.compile(r"\s+")


def clean_text(text: str, extra_allowed: str = "") -> str:
    disallowed = re.compile(f"[^{_BASE_ALLOWED}{re.escape(extra_allowed)}]")
    return _WHITESPACE.sub(" ", disallowed.sub(" ", text)).strip()


def word_count(text: str) -> int:
    return len(text.split())
