"""
Chooses how study content gets made for one request.

Order of preference:
  1. math-mode arithmetic  -> ArithmeticEvaluator (no retrieval, no AI)
  2. math-mode problem     -> AI providers only; failure is reported
  3. retrieved context     -> ContextSynthesizer (no AI)
  4. otherwise             -> AI providers in priority order, then MockLibrary

Providers are tried strictly one at a time, never concurrently.
"""
import logging
from typing import Optional, Sequence, Tuple

from classifier import is_arithmetic_expression, is_complex_problem
from errors import GenerationFailed, InvalidExpression, ProviderError, UpstreamUnavailable
from math_evaluator import ArithmeticEvaluator, clean_expression
from mock_library import MockLibrary
from models import GeneratedContent, MathQuestion, Mode
from prompts import build_prompt
from providers import Provider
from response_parser import extract_json, validate_content
from synthesizer import ContextSynthesizer

logger = logging.getLogger(__name__)

ARITHMETIC_TIP = (
    "Remember PEMDAS (Parentheses, Exponents, Multiplication/Division, Addition/Subtraction) when solving "
    "math expressions. Always work from left to right for operations of the same precedence."
)


def _attempt(provider: Provider, prompt: str) -> Tuple[bool, str]:
    try:
        text = provider.generate(prompt)
    except ProviderError as e:
        return False, str(e)
    except Exception as e:
        return False, f"{type(e).__name__}: {e}"
    if not text or not text.strip():
        return False, "Empty model response"
    return True, text


class ContentOrchestrator:
    def __init__(
        self,
        providers: Sequence[Provider] = (),
        evaluator: Optional[ArithmeticEvaluator] = None,
        synthesizer: Optional[ContextSynthesizer] = None,
        mock_library: Optional[MockLibrary] = None,
    ) -> None:
        self.providers = list(providers)
        self.evaluator = evaluator or ArithmeticEvaluator()
        self.synthesizer = synthesizer or ContextSynthesizer()
        self.mock_library = mock_library or MockLibrary()

    def generate(self, topic: str, context: Optional[str], mode: Mode) -> GeneratedContent:
        if mode == Mode.MATH and is_arithmetic_expression(clean_expression(topic)):
            logger.info("Study content for %r produced by arithmetic", topic)
            return self._solve_expression(topic)

        problem = mode == Mode.MATH and is_complex_problem(topic)
        if problem:
            logger.info("Complex math problem %r; ignoring retrieved context", topic)
            context = None
        elif context and context.strip():
            logger.info("Study content for %r produced by context (%d chars)", topic, len(context))
            return self.synthesizer.synthesize(topic, context, mode)

        if problem and not self.providers:
            raise UpstreamUnavailable(
                "AI providers are required for complex math problems. Configure at least one AI API key."
            )

        content = self._from_providers(topic, mode)
        if content is not None:
            return content

        if problem:
            raise GenerationFailed(
                "Failed to solve complex math problem. AI providers may be unavailable or rate-limited."
            )
        logger.info("Study content for %r produced by mock", topic)
        return self.mock_library.lookup(topic, mode)

    def _from_providers(self, topic: str, mode: Mode) -> Optional[GeneratedContent]:
        if not self.providers:
            logger.info("No AI providers configured")
            return None

        prompt = build_prompt(topic, mode)
        for provider in self.providers:
            ok, text = _attempt(provider, prompt)
            if not ok:
                logger.warning("Provider %s failed: %s", provider.name, text)
                continue

            ok, data = extract_json(text)
            if not ok:
                logger.warning("Provider %s returned unparseable output: %s", provider.name, data)
                continue

            ok, content = validate_content(data, mode, topic)
            if not ok:
                logger.warning("Provider %s returned invalid content: %s", provider.name, content)
                continue

            logger.info("Study content for %r produced by provider:%s", topic, provider.name)
            return content
        return None

    def _solve_expression(self, expression: str) -> GeneratedContent:
        try:
            result = self.evaluator.evaluate(expression)
        except InvalidExpression as e:
            logger.warning("Could not evaluate %r: %s", expression, e)
            return GeneratedContent(
                summary=[
                    f'The expression "{expression}" contains mathematical operations',
                    "Mathematical expressions follow order of operations (PEMDAS)",
                    "Understanding basic arithmetic is fundamental to mathematics",
                ],
                math_question=MathQuestion(
                    question=f"Evaluate the expression: {expression}",
                    answer="Undefined - the expression cannot be evaluated",
                    explanation=(
                        f"The expression could not be evaluated ({e}). Make sure it contains only numbers and "
                        "basic operators (+, -, *, /, parentheses) and never divides by zero."
                    ),
                ),
                study_tip=ARITHMETIC_TIP,
            )

        return GeneratedContent(
            summary=[
                f"Mathematical expression: {result.expression}",
                "This expression can be evaluated using standard order of operations (PEMDAS)",
                f"The result is {result.answer}",
            ],
            math_question=MathQuestion(
                question=f"Solve: {result.expression}",
                answer=result.answer,
                explanation=result.explanation,
            ),
            study_tip=ARITHMETIC_TIP,
        )
