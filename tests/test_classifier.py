import unittest

from classifier import is_arithmetic_expression, is_complex_problem


class TestArithmeticExpression(unittest.TestCase):
    def test_plain_expressions(self):
        self.assertTrue(is_arithmetic_expression("2 + 5"))
        self.assertTrue(is_arithmetic_expression("(10+5)/3"))
        self.assertTrue(is_arithmetic_expression("-4 * 2.5"))

    def test_rejects_text_and_operands_only(self):
        self.assertFalse(is_arithmetic_expression("What is Python?"))
        self.assertFalse(is_arithmetic_expression("42"))
        self.assertFalse(is_arithmetic_expression("+-"))
        self.assertFalse(is_arithmetic_expression("2^3"))
        self.assertFalse(is_arithmetic_expression(""))


class TestComplexProblem(unittest.TestCase):
    def test_algorithmic_question(self):
        self.assertTrue(is_complex_problem(
            "What is the worst-case time complexity of linear search on 1000 elements?"
        ))

    def test_word_problem(self):
        self.assertTrue(is_complex_problem("If you have 3 apples and eat one, how many are left?"))

    def test_calculation_with_problem_indicator(self):
        self.assertTrue(is_complex_problem("Calculate how long a train takes to travel 300 km at 60 km/h"))

    def test_plain_topics_are_not_problems(self):
        self.assertFalse(is_complex_problem("Fractions"))
        self.assertFalse(is_complex_problem("calculus"))
        self.assertFalse(is_complex_problem(""))

    def test_quantity_question_needs_several_sentences(self):
        self.assertFalse(is_complex_problem("how many moons"))
        self.assertTrue(is_complex_problem("A car moves. It stops. It moves again. How many times did it move?"))


if __name__ == "__main__":
    unittest.main()
