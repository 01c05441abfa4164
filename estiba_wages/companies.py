"""
Port terminal operators: full legal names, spellings seen in portal text, and
normalization to the four short codes.
"""
import re
from typing import Dict, List, Optional

# Full legal name -> company code
LEGAL_NAMES: Dict[str, str] = {
    "CSP IBERIAN VALENCIA TERMINAL": "CSP",
    "MEDITERRANEAN SHIPPING C. TV": "MSC",
    "APM TERMINALS VALENCIA": "APM",
    "VALENCIA TERMINAL EUROPA": "VTE",
}
COMPANY_CODES = tuple(dict.fromkeys(LEGAL_NAMES.values()))

# Short spellings that are not substrings of a legal name
ALIASES: Dict[str, str] = {
    "MSCTV": "MSC",
    "MSC TV": "MSC",
}

# Spellings recognized in free text, longest first so full names win over prefixes
COMPANY_SPELLINGS: List[str] = [
    r"CSP\s+IBERIAN\s+VALENCIA\s+TERMINAL",
    r"MEDITERRANEAN\s+SHIPPING\s+C\.?\s*TV",
    r"APM\s+TERMINALS\s+VALENCIA",
    r"VALENCIA\s+TERMINAL\s+EUROPA",
    r"MEDITERRANEAN",
    r"IBERIAN",
    r"MSCTV",
    r"CSP",
    r"MSC",
    r"APM",
    r"VTE",
]
COMPANY_PATTERN = "(?:" + "|".join(COMPANY_SPELLINGS) + ")"
COMPANY_RE = re.compile(r"\b(" + COMPANY_PATTERN + r")(?![\w])", re.IGNORECASE)

# Full names with spacing/punctuation tolerance (token-stream and compact-row layouts)
FULL_NAME_PATTERN = "(?:" + "|".join(COMPANY_SPELLINGS[:4]) + ")"
FULL_NAME_RE = re.compile(FULL_NAME_PATTERN, re.IGNORECASE)


def _squash(text: str) -> str:
    return re.sub(r"\s+", " ", (text or "").strip().upper())


def _loose(text: str) -> str:
    """Spacing and dots dropped, so 'C. TV' matches 'C.TV'."""
    return re.sub(r"[\s.]", "", text)


def normalize_company(text: Optional[str]) -> Optional[str]:
    """
    Company text -> CSP / MSC / APM / VTE when it is (part of) exactly one legal name,
    or a known alias. Anything else passes through uppercased.
    """
    if text is None:
        return None
    t = _squash(text)
    if not t:
        return None
    if t in COMPANY_CODES:
        return t
    if t in ALIASES:
        return ALIASES[t]
    loose = _loose(t)
    matches = {
        code for name, code in LEGAL_NAMES.items()
        if t in name or name in t or (loose and (loose in _loose(name) or _loose(name) in loose))
    }
    if len(matches) == 1:
        return matches.pop()
    return t


def find_company(text: str) -> Optional[re.Match]:
    """First recognizable company spelling in text."""
    if not text:
        return None
    return COMPANY_RE.search(text)


def is_company_line(text: str) -> bool:
    """Line holding nothing but a company spelling."""
    return bool(text) and COMPANY_RE.fullmatch(text.strip()) is not None
