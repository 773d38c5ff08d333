"""Pick the most useful recognition alternative for an utterance."""

import re

import structlog

from fracvoice.models import Alternative, SelectedAlternative

logger = structlog.get_logger(__name__)

DEFAULT_CONFIDENCE_THRESHOLD = 0.72
DEFAULT_PRESSURE_KEYWORD = "压力"

# Arabic numeral literals as emitted by the recognizer
NUMERAL_TOKEN_PATTERN = re.compile(r"\d+(?:\.\d+)?")


def score_transcript(transcript: str, pressure_keyword: str = DEFAULT_PRESSURE_KEYWORD) -> int:
    """Score a transcript by how much field data it seems to carry.

    One point per numeral token, two more when the pressure keyword appears.
    """
    numerals = len(NUMERAL_TOKEN_PATTERN.findall(transcript))
    has_pressure = 1 if pressure_keyword and pressure_keyword in transcript else 0
    return numerals + has_pressure * 2


def select_alternative(
    alternatives: list[Alternative],
    threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
    pressure_keyword: str = DEFAULT_PRESSURE_KEYWORD,
) -> SelectedAlternative:
    """Select the best alternative of one utterance.

    Alternatives at or above the confidence threshold compete on score, the
    first one seen wins ties. When none is confident enough, the most
    confident alternative is returned with a score of 0.

    Args:
        alternatives: Recognizer alternatives for one utterance.
        threshold: Minimum confidence for scoring.
        pressure_keyword: Keyword that earns the pressure bonus.

    Returns:
        SelectedAlternative with the chosen alternative and its score.

    Raises:
        ValueError: If no alternatives are given.
    """
    if not alternatives:
        raise ValueError("select_alternative requires at least one alternative")

    best: SelectedAlternative | None = None
    for alt in alternatives:
        if alt.confidence < threshold:
            continue
        score = score_transcript(alt.transcript, pressure_keyword)
        if best is None or score > best.score:
            best = SelectedAlternative(alternative=alt, score=score)

    if best is None:
        fallback = alternatives[0]
        for alt in alternatives[1:]:
            if alt.confidence > fallback.confidence:
                fallback = alt
        logger.debug(
            "alternative_below_threshold",
            threshold=threshold,
            confidence=fallback.confidence,
        )
        return SelectedAlternative(alternative=fallback, score=0)

    return best
