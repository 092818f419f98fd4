"""
Heuristic routing predicates for math-mode topics.

Precedence matters: callers check is_arithmetic_expression first and only
then is_complex_problem, so "2+2" is evaluated rather than sent to a model.
"""
import re

_ARITHMETIC_RE = re.compile(r"^[0-9+\-*/().]+$")
_OPERATOR_RE = re.compile(r"[+\-*/]")
_SENTENCE_END_RE = re.compile(r"[.!?]")

COMPLEXITY_TERMS = (
    "time complexity", "space complexity", "big o", "worst-case", "best-case", "worst case",
    "linear search", "binary search", "sort", "algorithm", "array", "overall complexity",
    "asymptotic", "o(n)", "o(log n)", "o(n log n)", "data structure", "tree", "graph", "hash",
    "heap", "stack", "queue",
)
CALCULATION_TERMS = (
    "calculate", "solve", "find", "what is", "how many", "determine", "compute", "evaluate",
    "result", "answer", "work out", "figure out",
)
PROBLEM_INDICATORS = (
    "if you", "suppose", "given that", "assume", "problem", "question", "how would",
    "what would", "how much", "how long", "scenario", "situation", "case", "example",
    "instance", "when", "where",
)
SITUATION_TERMS = (
    "you have", "you are", "you need", "you want", "given", "there are", "there is",
    "consider", "imagine", "think about", "word problem", "story problem", "real-world",
    "practical",
)
QUANTITY_QUESTIONS = ("how many", "how much", "how long", "how far", "how fast")


def _contains_any(text: str, terms) -> bool:
    return any(term in text for term in terms)


def is_arithmetic_expression(text: str) -> bool:
    if not text:
        return False
    compact = re.sub(r"\s+", "", text)
    return bool(
        _ARITHMETIC_RE.match(compact)
        and _OPERATOR_RE.search(compact)
        and re.search(r"\d", compact)
    )


def is_complex_problem(text: str) -> bool:
    if not text:
        return False
    lower = text.lower()

    complexity = _contains_any(lower, COMPLEXITY_TERMS)
    calculation = _contains_any(lower, CALCULATION_TERMS)
    situation = _contains_any(lower, SITUATION_TERMS)
    problem = _contains_any(lower, PROBLEM_INDICATORS)
    quantity = _contains_any(lower, QUANTITY_QUESTIONS)
    sentence_marks = len(_SENTENCE_END_RE.findall(text))

    return (
        complexity
        or situation
        or (calculation and problem)
        or (quantity and sentence_marks > 2)
        or ("?" in text and (complexity or calculation or situation))
    )
