"""Capture session gate for recognizer callbacks."""

import structlog

from fracvoice.models import RecognitionResult, SelectedAlternative
from fracvoice.speech.selector import (
    DEFAULT_CONFIDENCE_THRESHOLD,
    DEFAULT_PRESSURE_KEYWORD,
    select_alternative,
)

logger = structlog.get_logger(__name__)


class CaptureSession:
    """Tracks whether the operator is holding the talk button.

    The recognizer runs in continuous mode and may call back after the
    button is released; those late results are discarded.
    """

    def __init__(
        self,
        threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
        pressure_keyword: str = DEFAULT_PRESSURE_KEYWORD,
    ):
        self.threshold = threshold
        self.pressure_keyword = pressure_keyword
        self.active = False
        self.results_discarded = 0

    def start(self) -> None:
        self.active = True
        logger.debug("capture_session_started")

    def stop(self) -> None:
        self.active = False
        logger.debug("capture_session_stopped")

    def select(self, results: list[RecognitionResult]) -> list[SelectedAlternative]:
        """Pick one alternative per finalized result.

        Returns an empty list when the session is inactive or nothing final
        with alternatives was delivered.
        """
        if not self.active:
            self.results_discarded += len(results)
            logger.info("late_results_discarded", count=len(results))
            return []

        selections = []
        for result in results:
            if not result.is_final or not result.alternatives:
                continue
            selections.append(
                select_alternative(
                    result.alternatives,
                    threshold=self.threshold,
                    pressure_keyword=self.pressure_keyword,
                )
            )
        return selections
