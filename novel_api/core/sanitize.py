"""
Comment text sanitizing
"""

import re
from typing import Callable

Sanitizer = Callable[[str], str]

# Executable blocks are dropped together with their content
_BLOCK_RE = re.compile(r'<(script|style|iframe|object|embed)\b[^>]*>.*?</\1\s*>', re.IGNORECASE | re.DOTALL)
_TAG_RE = re.compile(r'</?[a-zA-Z!][^>]*>')
_UNCLOSED_TAG_RE = re.compile(r'<[a-zA-Z!/][^<>]*$')


def strip_markup(value: str) -> str:
    """Remove markup, keeping only the plain text"""
    text = _BLOCK_RE.sub('', str(value))
    text = _TAG_RE.sub('', text)
    text = _UNCLOSED_TAG_RE.sub('', text)
    return text.strip()


def get_sanitizer() -> Sanitizer:
    """Sanitizer dependency"""
    return strip_markup
