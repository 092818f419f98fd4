import unittest
from unittest.mock import MagicMock

from errors import InvalidInput
from mock_library import MockLibrary
from models import Mode, RetrievedContext
from orchestrator import ContentOrchestrator
from pipeline import StudyPipeline, parse_mode

ML_CONTEXT = RetrievedContext(
    extract="Machine learning is a field of study in artificial intelligence.",
    title="Machine learning",
    source_url="https://en.wikipedia.org/wiki/Machine_learning",
)


class TestParseMode(unittest.TestCase):
    def test_accepts_strings_and_enum(self):
        self.assertEqual(parse_mode("math"), Mode.MATH)
        self.assertEqual(parse_mode(" Normal "), Mode.NORMAL)
        self.assertEqual(parse_mode(Mode.MATH), Mode.MATH)

    def test_rejects_unknown(self):
        for mode in ("banana", "", None):
            with self.assertRaises(InvalidInput):
                parse_mode(mode)


class TestStudyPipeline(unittest.TestCase):
    def setUp(self):
        self.retriever = MagicMock()
        self.orchestrator = MagicMock()
        self.content = MockLibrary().lookup("machine learning", Mode.NORMAL)
        self.orchestrator.generate.return_value = self.content
        self.history = MagicMock()
        self.pipeline = StudyPipeline(self.retriever, self.orchestrator, self.history)

    def test_rejects_empty_topic(self):
        for topic in ("", "   ", None):
            with self.assertRaises(InvalidInput):
                self.pipeline.run(topic, "normal")
        self.orchestrator.generate.assert_not_called()

    def test_rejects_invalid_mode(self):
        with self.assertRaises(InvalidInput):
            self.pipeline.run("Python", "quiz")
        self.retriever.fetch.assert_not_called()

    def test_normal_mode_uses_normalized_topic(self):
        self.retriever.fetch.return_value = ML_CONTEXT

        result = self.pipeline.run("What is machine learning?", "normal")

        self.retriever.fetch.assert_called_once_with("machine learning")
        self.orchestrator.generate.assert_called_once_with("machine learning", ML_CONTEXT.extract, Mode.NORMAL)
        self.assertEqual(result.topic, "machine learning")
        self.assertEqual(result.source_url, ML_CONTEXT.source_url)
        self.assertIs(result.content, self.content)

    def test_retries_with_raw_topic(self):
        self.retriever.fetch.side_effect = [None, ML_CONTEXT]

        result = self.pipeline.run("What is machine learning?", Mode.NORMAL)

        self.assertEqual(
            [c.args[0] for c in self.retriever.fetch.call_args_list],
            ["machine learning", "What is machine learning?"],
        )
        self.assertEqual(result.source_url, ML_CONTEXT.source_url)

    def test_no_retry_when_topic_is_already_clean(self):
        self.retriever.fetch.return_value = None

        result = self.pipeline.run("Python", "normal")

        self.retriever.fetch.assert_called_once_with("Python")
        self.orchestrator.generate.assert_called_once_with("Python", None, Mode.NORMAL)
        self.assertIsNone(result.source_url)

    def test_math_mode_skips_retrieval(self):
        self.pipeline.run("What is 12 * 4?", "math")

        self.retriever.fetch.assert_not_called()
        self.orchestrator.generate.assert_called_once_with("What is 12 * 4?", None, Mode.MATH)

    def test_history_is_recorded_for_users(self):
        result = self.pipeline.run("Python", "normal", user_id="user-1")

        self.history.append.assert_called_once_with("user-1", "Python", Mode.NORMAL, result.timestamp)

    def test_history_records_cleaned_topic(self):
        self.retriever.fetch.return_value = ML_CONTEXT

        result = self.pipeline.run("What is machine learning?", "normal", user_id="user-1")

        self.history.append.assert_called_once_with("user-1", "machine learning", Mode.NORMAL, result.timestamp)
        self.assertEqual(result.topic, "machine learning")

    def test_math_mode_keeps_raw_topic(self):
        result = self.pipeline.run("What is 12 * 4?", "math", user_id="user-1")

        self.assertEqual(result.topic, "What is 12 * 4?")
        self.history.append.assert_called_once_with("user-1", "What is 12 * 4?", Mode.MATH, result.timestamp)

    def test_history_skipped_without_user(self):
        self.pipeline.run("Python", "normal")
        self.history.append.assert_not_called()

    def test_history_failure_is_swallowed(self):
        self.history.append.side_effect = RuntimeError("database is locked")

        with self.assertLogs("pipeline", level="ERROR"):
            result = self.pipeline.run("Python", "normal", user_id="user-1")

        self.assertIs(result.content, self.content)

    def test_payload_shape(self):
        self.retriever.fetch.return_value = ML_CONTEXT

        payload = self.pipeline.run("Machine learning", "normal").to_payload()

        self.assertTrue(payload["success"])
        self.assertEqual(payload["mode"], "normal")
        self.assertEqual(payload["sourceUrl"], ML_CONTEXT.source_url)
        self.assertEqual(len(payload["summary"]), 3)
        self.assertEqual(len(payload["quiz"]), 3)
        self.assertIn("correctAnswer", payload["quiz"][0])
        self.assertIn("studyTip", payload)
        self.assertNotIn("mathQuestion", payload)


class TestEndToEnd(unittest.TestCase):
    def test_world_war_ii_without_providers_or_article(self):
        retriever = MagicMock()
        retriever.fetch.return_value = None
        pipeline = StudyPipeline(retriever, ContentOrchestrator(providers=[]))

        result = pipeline.run("World War II", "normal")

        self.assertEqual(len(result.content.summary), 3)
        self.assertEqual([q.correct_answer for q in result.content.quiz], ["A", "A", "A"])
        self.assertIsNone(result.source_url)


if __name__ == "__main__":
    unittest.main()
