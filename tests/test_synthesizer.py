import re
import unittest

from models import Mode
from synthesizer import ContextSynthesizer, build_summary, split_sentences

PHOTOSYNTHESIS = (
    "Photosynthesis is the process by which green plants convert light into chemical energy. "
    "It takes place mainly in the chloroplasts of leaf cells. "
    "The process releases oxygen as a by-product into the atmosphere. "
    "Most life on Earth depends on photosynthesis for food and oxygen."
)


class TestSentenceHelpers(unittest.TestCase):
    def test_split_drops_short_fragments(self):
        sentences = split_sentences("Too short. " + PHOTOSYNTHESIS)
        self.assertEqual(len(sentences), 4)
        self.assertTrue(sentences[0].startswith("Photosynthesis is the process"))

    def test_summary_pads_from_text_windows(self):
        cleaned = "x" * 400
        summary = build_summary("Noise", cleaned, [])
        self.assertEqual(len(summary), 3)
        self.assertTrue(summary[0].endswith("..."))

    def test_summary_pads_with_generic_line(self):
        summary = build_summary("Tiny", "Tiny.", [])
        self.assertEqual(summary[0], "Tiny.")
        self.assertEqual(len(summary), 3)
        self.assertIn("Tiny", summary[2])


class TestNormalMode(unittest.TestCase):
    def test_quiz_is_quoted_from_source(self):
        content = ContextSynthesizer().synthesize("Photosynthesis", PHOTOSYNTHESIS, Mode.NORMAL)

        self.assertEqual(len(content.summary), 3)
        self.assertEqual(len(content.quiz), 3)
        self.assertEqual([q.correct_answer for q in content.quiz], ["A", "B", "C"])
        self.assertTrue(content.quiz[0].options[0].startswith("A) Photosynthesis is the process"))
        self.assertIn("chemical energy", content.quiz[0].explanation)
        self.assertIn("Photosynthesis", content.study_tip)
        for item in content.quiz:
            self.assertEqual([o[:3] for o in item.options], ["A) ", "B) ", "C) ", "D) "])

    def test_sparse_context_still_yields_three_questions(self):
        content = ContextSynthesizer().synthesize("Tiny", "Tiny.", Mode.NORMAL)
        self.assertEqual(len(content.quiz), 3)
        self.assertEqual([q.correct_answer for q in content.quiz], ["A", "B", "C"])


class TestMathMode(unittest.TestCase):
    def test_question_uses_numbers_from_source(self):
        context = "The reactor produced 12 units on Monday and 4 units on Tuesday, as recorded in the plant log."
        content = ContextSynthesizer(seed=7).synthesize("Reactors", context, Mode.MATH)

        self.assertIsNone(content.quiz)
        self.assertIn("12", content.math_question.question)
        self.assertIn("4", content.math_question.question)
        self.assertIn(content.math_question.answer, {"16", "8", "48", "3.00"})

    def test_seeded_output_is_repeatable(self):
        context = "The reactor produced 12 units on Monday and 4 units on Tuesday, as recorded in the plant log."
        first = ContextSynthesizer(seed=3).synthesize("Reactors", context, Mode.MATH)
        second = ContextSynthesizer(seed=3).synthesize("Reactors", context, Mode.MATH)
        self.assertEqual(first, second)

    def test_zero_divisor_is_never_divided(self):
        context = "The sample contained 5 grams of salt and 0 grams of sugar in the final mixture."
        for seed in range(25):
            question = ContextSynthesizer(seed=seed).synthesize("Mixtures", context, Mode.MATH).math_question
            self.assertNotIn("÷", question.question)
            self.assertIn(question.answer, {"5", "0"})

    def test_word_ratio_without_numbers(self):
        content = ContextSynthesizer().synthesize("Photosynthesis", PHOTOSYNTHESIS, Mode.MATH)
        self.assertRegex(content.math_question.answer, re.compile(r"^\d+\.\d{2}$"))
        self.assertIn("characters per word", content.math_question.explanation)


if __name__ == "__main__":
    unittest.main()
