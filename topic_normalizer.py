"""
Turns a free-text study query into the subject phrase worth looking up.

"What is machine learning?" -> "machine learning"
"Explain how neural networks learn from data in practice" -> "neural networks"
"""
import re

_PREFIX_RE = re.compile(
    r"^(what is|what's|what are|tell me about|explain|describe|define|what do you know about)\s+",
    re.IGNORECASE,
)
_ARTICLE_RE = re.compile(r"^(a|an)\s+", re.IGNORECASE)
_PUNCTUATION = ",.;:!?\"'()"

DOMAIN_TERMS = {
    "python", "javascript", "java", "machine", "learning", "data", "structure", "structures",
    "algorithm", "algorithms", "calculus", "algebra", "geometry", "statistics", "biology",
    "chemistry", "physics", "quantum", "computing", "artificial", "intelligence", "neural",
    "network", "networks",
}
# Terms that usually only make sense together with the next word ("machine learning").
PAIRABLE_TERMS = {"machine", "data", "world", "war", "artificial", "neural", "quantum"}


def _clean(text: str) -> str:
    """Strip interrogative framing, trailing question marks and a leading article until stable."""
    cleaned = " ".join(text.split())
    while True:
        previous = cleaned
        cleaned = _PREFIX_RE.sub("", cleaned)
        cleaned = cleaned.rstrip("?").strip()
        cleaned = _ARTICLE_RE.sub("", cleaned)
        if cleaned == previous:
            return cleaned


def _pick(words, i: int) -> str:
    word = words[i]
    lower = word.lower()
    nxt = words[i + 1] if i + 1 < len(words) else ""
    if lower in DOMAIN_TERMS:
        if nxt and lower in PAIRABLE_TERMS:
            return f"{word} {nxt}"
        return word[0].upper() + word[1:]
    if nxt and (lower in PAIRABLE_TERMS or len(nxt) > 2):
        return f"{word} {nxt}"
    return word


def normalize(raw_query: str) -> str:
    cleaned = _clean(raw_query or "")
    if not cleaned:
        return ""

    raw_words = cleaned.split()
    if len(raw_words) <= 4:
        return cleaned

    words = [w.strip(_PUNCTUATION) for w in raw_words]
    words = [w for w in words if w]
    for i, word in enumerate(words):
        if word.lower() in DOMAIN_TERMS or (word[0].isupper() and len(word) > 2):
            return _clean(_pick(words, i)) or cleaned

    return _clean(" ".join(raw_words[:3])) or cleaned
