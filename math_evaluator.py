import ast
import logging
import math
import operator
import re
from dataclasses import dataclass

import requests

import config
from errors import InvalidExpression

logger = logging.getLogger(__name__)

HEADERS = {"User-Agent": "StudyMaterialAPI/1.0"}

_INSTRUCTION_RE = re.compile(r"\b(what is|solve|calculate|evaluate|compute|find)\b", re.IGNORECASE)
_WORD_OPERATORS = (
    (r"multiplied by", "*"),
    (r"divided by", "/"),
    (r"plus", "+"),
    (r"minus", "-"),
    (r"times", "*"),
    (r"over", "/"),
)
_WHITELIST_RE = re.compile(r"^[\d+\-*/().]+$")

_SAFE_OPS = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.USub: operator.neg,
    ast.UAdd: operator.pos,
}


@dataclass(frozen=True)
class EvaluationResult:
    expression: str
    answer: str
    explanation: str
    source: str


def clean_expression(expression: str) -> str:
    """Rewrite operator words as symbols and drop instruction verbs and question marks."""
    cleaned = (expression or "").strip()
    cleaned = _INSTRUCTION_RE.sub(" ", cleaned)
    for word, symbol in _WORD_OPERATORS:
        cleaned = re.sub(rf"\s*\b{word}\b\s*", symbol, cleaned, flags=re.IGNORECASE)
    cleaned = cleaned.replace("?", "").replace("=", "")
    return " ".join(cleaned.split())


def format_number(value: float) -> str:
    try:
        value = float(value)
    except OverflowError as e:
        raise InvalidExpression("Result is too large") from e
    if not math.isfinite(value):
        raise InvalidExpression("Result is not a finite number")
    if value.is_integer():
        return str(int(value))
    return str(round(value, 10))


def _eval_node(node):
    if isinstance(node, ast.Constant) and isinstance(node.value, (int, float)) and not isinstance(node.value, bool):
        return node.value
    if isinstance(node, ast.BinOp):
        op_fn = _SAFE_OPS.get(type(node.op))
        if op_fn is None:
            raise InvalidExpression("Unsupported operator")
        return op_fn(_eval_node(node.left), _eval_node(node.right))
    if isinstance(node, ast.UnaryOp):
        op_fn = _SAFE_OPS.get(type(node.op))
        if op_fn is None:
            raise InvalidExpression("Unsupported unary operator")
        return op_fn(_eval_node(node.operand))
    raise InvalidExpression("Unsupported expression")


def evaluate_locally(expression: str) -> float:
    compact = re.sub(r"\s+", "", expression)
    if not compact or not _WHITELIST_RE.match(compact):
        raise InvalidExpression("Expression contains disallowed characters")
    try:
        tree = ast.parse(compact, mode="eval")
    except SyntaxError as e:
        raise InvalidExpression(f"Malformed expression: {e.msg}") from e
    try:
        return _eval_node(tree.body)
    except ZeroDivisionError as e:
        raise InvalidExpression("Division by zero") from e
    except OverflowError as e:
        raise InvalidExpression("Number too large to evaluate") from e


def explain(expression: str, answer: str) -> str:
    compact = re.sub(r"\s+", "", expression)
    rules = []
    if "(" in compact:
        rules.append("Evaluate expressions inside parentheses first")
    if "*" in compact or "/" in compact:
        rules.append("Perform multiplication and division from left to right")
    if "+" in compact or "-" in compact.lstrip("-"):
        rules.append("Perform addition and subtraction from left to right")

    steps = [f"Step {i}: {rule}" for i, rule in enumerate(rules, start=1)]
    if not steps:
        steps.append(f"Direct evaluation: {expression}")
    steps.append(f"Final answer: {expression} = {answer}")
    return "\n".join(steps)


class ArithmeticEvaluator:
    """Evaluates plain arithmetic with mathjs, falling back to a whitelisted local evaluator."""

    def __init__(self, api_url: str = config.MATHJS_API_URL, timeout: float = 10) -> None:
        self.api_url = api_url
        self.timeout = timeout

    def _evaluate_remote(self, expression: str) -> str:
        resp = requests.get(self.api_url, params={"expr": expression}, headers=HEADERS, timeout=self.timeout)
        resp.raise_for_status()
        try:
            value = float(resp.text.strip())
        except ValueError as e:
            raise InvalidExpression(f"Non-numeric result {resp.text[:50]!r}") from e
        return format_number(value)

    def evaluate(self, expression: str) -> EvaluationResult:
        cleaned = clean_expression(expression)
        if not cleaned:
            raise InvalidExpression("Empty expression")

        try:
            answer = self._evaluate_remote(cleaned)
            source = "mathjs"
        except (requests.RequestException, InvalidExpression) as e:
            logger.info("mathjs evaluation failed for %r (%s); evaluating locally", cleaned, e)
            answer = format_number(evaluate_locally(cleaned))
            source = "local"

        return EvaluationResult(
            expression=cleaned,
            answer=answer,
            explanation=explain(cleaned, answer),
            source=source,
        )
