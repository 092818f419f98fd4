import logging
from datetime import datetime, timezone
from typing import Optional, Union

from errors import InvalidInput
from models import Mode, RetrievedContext, StudyResult
from orchestrator import ContentOrchestrator
from topic_normalizer import normalize
from wikipedia import WikipediaRetriever

logger = logging.getLogger(__name__)


def parse_mode(mode: Union[str, Mode, None]) -> Mode:
    if isinstance(mode, Mode):
        return mode
    try:
        return Mode((mode or "").strip().lower())
    except ValueError:
        raise InvalidInput(f"Mode must be one of: {', '.join(m.value for m in Mode)}") from None


class StudyPipeline:
    """
    One study request end to end: validate, retrieve, generate, record.

    `history_store` only needs an `append(user_id, topic, mode, timestamp)` method;
    when it is None or no user id is given, nothing is recorded.
    """

    def __init__(
        self,
        retriever: Optional[WikipediaRetriever] = None,
        orchestrator: Optional[ContentOrchestrator] = None,
        history_store=None,
    ) -> None:
        self.retriever = retriever or WikipediaRetriever()
        self.orchestrator = orchestrator or ContentOrchestrator()
        self.history_store = history_store

    def _retrieve(self, raw_topic: str, topic: str) -> Optional[RetrievedContext]:
        context = self.retriever.fetch(topic)
        if context is None and topic != raw_topic:
            logger.info("No article for cleaned topic %r, retrying with %r", topic, raw_topic)
            context = self.retriever.fetch(raw_topic)
        return context

    def run(self, topic: Optional[str], mode: Union[str, Mode, None] = Mode.NORMAL, user_id: Optional[str] = None) -> StudyResult:
        raw_topic = (topic or "").strip()
        if not raw_topic:
            raise InvalidInput("Topic is required")
        mode = parse_mode(mode)

        context: Optional[RetrievedContext] = None
        if mode == Mode.MATH:
            subject = raw_topic
        else:
            subject = normalize(raw_topic) or raw_topic
            context = self._retrieve(raw_topic, subject)

        content = self.orchestrator.generate(subject, context.extract if context else None, mode)
        timestamp = datetime.now(timezone.utc)

        if user_id and self.history_store is not None:
            try:
                self.history_store.append(user_id, subject, mode, timestamp)
            except Exception:
                logger.exception("Failed to save history for user %s", user_id)

        return StudyResult(
            topic=subject,
            mode=mode,
            timestamp=timestamp,
            source_url=context.source_url if context else None,
            content=content,
        )
