"""
Builds study content straight from retrieved text, without any AI call.

Summary points and quiz stems are quoted from the source sentences, so the
output can never contradict the text it came from.
"""
import logging
import random
import re
from typing import List, Optional

from models import OPTION_LETTERS, GeneratedContent, MathQuestion, Mode, QuizItem

logger = logging.getLogger(__name__)

MIN_SENTENCE = 30
MAX_SENTENCE = 500
POINT_LENGTH = 150

_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")
_NUMBER_RE = re.compile(r"\d+(?:\.\d+)?")

DEFINITION_DISTRACTORS = (
    "A medical procedure unrelated to this topic",
    "A technology concept with no clear definition",
    "An undefined term with no specific meaning",
)
ASPECT_DISTRACTORS = (
    "An approach that is not mentioned in the information",
    "A concept that contradicts the provided information",
    "Something completely unrelated to the topic",
)
APPLICATION_DISTRACTORS = (
    "It has no practical applications or importance",
    "It is only used in theoretical contexts",
    "It is not relevant to any field",
)
MENTION_DISTRACTORS = (
    "Information not found in the source text",
    "Details that contradict the provided information",
    "Facts unrelated to the topic",
)


def _shorten(text: str, limit: int) -> str:
    text = text.strip()
    if len(text) > limit:
        return text[: limit - 3].rstrip() + "..."
    return text


def _fmt(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def split_sentences(text: str) -> List[str]:
    sentences = (s.strip() for s in _SENTENCE_SPLIT_RE.split(text))
    return [s for s in sentences if MIN_SENTENCE < len(s) < MAX_SENTENCE]


def build_summary(topic: str, cleaned: str, sentences: List[str]) -> List[str]:
    summary = [_shorten(s, POINT_LENGTH) for s in sentences[:3]]

    offset = len("".join(summary))
    while len(summary) < 3 and offset < len(cleaned):
        window = cleaned[offset : offset + POINT_LENGTH].strip()
        offset += POINT_LENGTH
        if not window:
            continue
        if offset < len(cleaned):
            window += "..."
        summary.append(window)

    while len(summary) < 3:
        summary.append(f"{topic} is described in the retrieved source text.")
    return summary


def _quiz_item(question: str, correct: str, distractors, letter: str, excerpt: str) -> QuizItem:
    others = iter(distractors)
    options = []
    for label in OPTION_LETTERS:
        body = correct if label == letter else next(others)
        options.append(f"{label}) {body}")
    return QuizItem(
        question=question,
        options=options,
        correct_answer=letter,
        explanation=f'This comes directly from the source text: "{_shorten(excerpt, 120)}"',
    )


class ContextSynthesizer:
    def __init__(self, seed: Optional[int] = None) -> None:
        self.seed = seed

    def synthesize(self, topic: str, context: str, mode: Mode) -> GeneratedContent:
        cleaned = " ".join(context.split())
        sentences = split_sentences(cleaned)
        logger.info("Synthesizing %s content for %r from %d usable sentences", mode.value, topic, len(sentences))

        summary = build_summary(topic, cleaned, sentences)
        if mode == Mode.MATH:
            return GeneratedContent(
                summary=summary,
                math_question=self._math_question(topic, context, cleaned, sentences),
                study_tip=(
                    f"To master {topic}, practice quantitative problems related to the concepts. "
                    "Break down complex calculations into smaller steps."
                ),
            )
        return GeneratedContent(
            summary=summary,
            quiz=self._quiz(topic, sentences, summary),
            study_tip=(
                f"To effectively study {topic}, review the key points from the source article and focus on "
                "understanding the main concepts and their relationships."
            ),
        )

    def _math_question(self, topic: str, context: str, cleaned: str, sentences: List[str]) -> MathQuestion:
        numbers = [float(n) for n in _NUMBER_RE.findall(context)]
        if len(numbers) >= 2:
            a, b = numbers[0], numbers[1]
            # A zero divisor removes division from the draw.
            operations = ["+", "-", "*", "/"] if b != 0 else ["+", "-", "*"]
            op = random.Random(self.seed).choice(operations)
            sa, sb = _fmt(a), _fmt(b)

            if op == "+":
                result = _fmt(a + b)
                question = f"what is {sa} + {sb}?"
                explanation = f"Adding {sa} and {sb} gives us {result}."
            elif op == "-":
                result = _fmt(abs(a - b))
                question = f"what is the difference between {sa} and {sb}?"
                explanation = f"The difference between {sa} and {sb} is {result}."
            elif op == "*":
                result = _fmt(round(a * b, 6))
                question = f"what is {sa} × {sb}?"
                explanation = f"Multiplying {sa} by {sb} gives us {result}."
            else:
                result = f"{a / b:.2f}"
                question = f"what is {sa} ÷ {sb}, rounded to 2 decimal places?"
                explanation = f"Dividing {sa} by {sb} gives us {result}."

            return MathQuestion(
                question=f"Based on the information about {topic}, if we have {sa} and {sb} (numbers mentioned in the article), {question}",
                answer=result,
                explanation=f"{explanation} This calculation uses numerical data from the source article about {topic}.",
            )

        first = (sentences[0] if sentences else cleaned[:200]) or f"{topic} is described in the retrieved source text."
        words = len(first.split())
        chars = len(first)
        ratio = f"{chars / words:.2f}"
        return MathQuestion(
            question=(
                f"Based on the source information about {topic}, if the first key point contains {words} words "
                f"and {chars} characters, what is the average number of characters per word? Round to 2 decimal places."
            ),
            answer=ratio,
            explanation=(
                f"To find the average characters per word, divide total characters ({chars}) by total words "
                f"({words}): {chars} ÷ {words} = {ratio} characters per word."
            ),
        )

    def _quiz(self, topic: str, sentences: List[str], summary: List[str]) -> List[QuizItem]:
        quiz: List[QuizItem] = []
        n = len(sentences)

        if n >= 1:
            first = sentences[0]
            question = (
                f"What is {topic} according to the information provided?"
                if len(first) > 100
                else f"According to the source information, what is {topic}?"
            )
            quiz.append(_quiz_item(question, _shorten(first, 103), DEFINITION_DISTRACTORS, "A", first))

        if n >= 2:
            middle = sentences[max(1, n // 2)]
            quiz.append(_quiz_item(
                f"What is a key aspect, characteristic, or method related to {topic} mentioned in the source information?",
                _shorten(middle, 83), ASPECT_DISTRACTORS, "B", middle,
            ))

        if n >= 3:
            middle_index = max(1, n // 2)
            later = sentences[min(n - 1, max(middle_index + 1, 2 * n // 3))]
            quiz.append(_quiz_item(
                f"Based on the source information, how is {topic} used, why is it important, or what are its applications?",
                _shorten(later, 83), APPLICATION_DISTRACTORS, "C", later,
            ))

        for point in summary[len(quiz):]:
            letter = OPTION_LETTERS[len(quiz)]
            quiz.append(_quiz_item(
                f"Which of the following is mentioned in the source information about {topic}?",
                _shorten(point, 83), MENTION_DISTRACTORS, letter, point,
            ))
        return quiz[:3]
