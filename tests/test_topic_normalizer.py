import unittest

from topic_normalizer import normalize


class TestNormalize(unittest.TestCase):
    def test_strips_question_framing(self):
        self.assertEqual(normalize("What is machine learning?"), "machine learning")
        self.assertEqual(normalize("Tell me about photosynthesis"), "photosynthesis")
        self.assertEqual(normalize("What is a black hole?"), "black hole")

    def test_repeated_prefixes_are_all_removed(self):
        self.assertEqual(normalize("What is what is an  atom???"), "atom")

    def test_short_topics_are_kept(self):
        self.assertEqual(normalize("World War II"), "World War II")

    def test_long_query_picks_domain_term_pair(self):
        self.assertEqual(normalize("Explain how neural networks learn from data in practice"), "neural networks")

    def test_long_query_picks_single_domain_term(self):
        self.assertEqual(normalize("I want to learn python for my new job"), "Python")

    def test_long_query_without_anchor_keeps_first_words(self):
        self.assertEqual(
            normalize("What is a binary search tree used for in computer science?"),
            "binary search tree",
        )

    def test_empty_input(self):
        self.assertEqual(normalize(""), "")
        self.assertEqual(normalize("   ?  "), "")
        self.assertEqual(normalize(None), "")

    def test_normalize_is_idempotent(self):
        queries = [
            "What is machine learning?",
            "Explain how neural networks learn from data in practice",
            "I want to learn python for my new job",
            "What is a binary search tree used for in computer science?",
            "Can you tell me how Quantum Computing changes cryptography",
            "describe an apple",
            "World War II",
            "tell me about the causes of the French Revolution in Europe",
        ]
        for query in queries:
            once = normalize(query)
            self.assertEqual(normalize(once), once, query)


if __name__ == "__main__":
    unittest.main()
