"""Turn an utterance into a labelled stage entry.

PIPELINE:
1. Normalize filler characters to spaces
2. Tokenize numeral runs (Arabic or spoken) and the pressure keyword
3. Convert spoken numerals to numeric strings
4. Pull out the pressure reading
5. Assign the rest to the fixed labels by position
6. Merge the labelled values into the next open stage
"""

import re
from dataclasses import dataclass, field
from typing import Optional

import structlog

from fracvoice.models import StageRecord
from fracvoice.speech.numerals import SPOKEN_CHARS, is_spoken_numeral, parse_numeral
from fracvoice.speech.selector import DEFAULT_PRESSURE_KEYWORD

logger = structlog.get_logger(__name__)


# =============================================================================
# Labels and Patterns
# =============================================================================

MATERIAL_LABEL = "料"
SAND_VOLUME_LABEL = "砂量"
SAND_RATIO_LABEL = "砂比"
CURRENT_LIQUID_LABEL = "当前液量"

# Positional order of spoken values
FIELD_LABELS = (MATERIAL_LABEL, SAND_VOLUME_LABEL, SAND_RATIO_LABEL, CURRENT_LIQUID_LABEL)

# Label -> StageRecord attribute
LABEL_FIELDS = {
    MATERIAL_LABEL: "material",
    SAND_VOLUME_LABEL: "sand_volume",
    SAND_RATIO_LABEL: "sand_ratio",
    CURRENT_LIQUID_LABEL: "current_liquid",
}

# Conjunctions and punctuation the recognizer inserts between values
FILLER_PATTERN = re.compile(r"[和及时，、]")


def _token_pattern(pressure_keyword: str) -> re.Pattern:
    return re.compile(
        rf"{re.escape(pressure_keyword)}|\d+(?:\.\d+)?|[{SPOKEN_CHARS}]+"
    )


def _segment_pattern(pressure_keyword: str) -> re.Pattern:
    labels = "|".join(re.escape(label) for label in (*FIELD_LABELS, pressure_keyword))
    return re.compile(rf"^({labels})(.+)$")


@dataclass
class UtteranceFields:
    """Values extracted from one utterance, before merging."""

    values: list[str] = field(default_factory=list)
    pressure: Optional[str] = None


# =============================================================================
# Steps
# =============================================================================

def normalize_utterance(text: str) -> str:
    """Replace filler characters with spaces."""
    return FILLER_PATTERN.sub(" ", text)


def tokenize_utterance(text: str, pressure_keyword: str = DEFAULT_PRESSURE_KEYWORD) -> list[str]:
    """Extract numeral runs and pressure keywords, left to right."""
    return _token_pattern(pressure_keyword).findall(text)


def convert_tokens(tokens: list[str], pressure_keyword: str = DEFAULT_PRESSURE_KEYWORD) -> list[str]:
    """Convert spoken numerals; Arabic numerals and keywords pass through."""
    converted = []
    for token in tokens:
        if token != pressure_keyword and is_spoken_numeral(token):
            converted.append(parse_numeral(token))
        else:
            converted.append(token)
    return converted


def extract_pressure(
    values: list[str],
    pressure_keyword: str = DEFAULT_PRESSURE_KEYWORD,
) -> UtteranceFields:
    """Split the pressure reading off the positional values.

    The first keyword followed by a value claims that value. Keywords with
    nothing to claim are discarded so they never land in a labelled field.
    """
    remaining = list(values)
    pressure = None

    if pressure_keyword in remaining:
        idx = remaining.index(pressure_keyword)
        if idx + 1 < len(remaining) and remaining[idx + 1] and remaining[idx + 1] != pressure_keyword:
            pressure = remaining[idx + 1]
            del remaining[idx:idx + 2]

    remaining = [v for v in remaining if v != pressure_keyword]
    return UtteranceFields(values=remaining, pressure=pressure)


def build_display_line(text: str, pressure_keyword: str = DEFAULT_PRESSURE_KEYWORD) -> str:
    """Build the labelled display line for an utterance.

    Args:
        text: Recognized utterance text.
        pressure_keyword: Keyword introducing a pressure reading.

    Returns:
        Line such as "料5 砂量12 砂比0.3 当前液量100 压力35", or "" when the
        utterance carries no numerals.
    """
    tokens = tokenize_utterance(normalize_utterance(text), pressure_keyword)
    fields = extract_pressure(convert_tokens(tokens, pressure_keyword), pressure_keyword)

    parts = [f"{label}{value}" for label, value in zip(FIELD_LABELS, fields.values)]
    if fields.pressure is not None:
        parts.append(f"{pressure_keyword}{fields.pressure}")

    line = " ".join(parts)
    logger.debug("display_line_built", tokens=len(tokens), line=line)
    return line


def parse_display_line(line: str, pressure_keyword: str = DEFAULT_PRESSURE_KEYWORD) -> dict[str, str]:
    """Parse a display line back into a label -> value mapping."""
    pattern = _segment_pattern(pressure_keyword)
    mapping: dict[str, str] = {}
    for segment in line.split():
        match = pattern.match(segment)
        if match:
            mapping[match.group(1)] = match.group(2)
    return mapping


def fill_next_open_stage(
    stages: list[StageRecord],
    mapping: dict[str, str],
    pressure_keyword: str = DEFAULT_PRESSURE_KEYWORD,
) -> Optional[int]:
    """Write labelled values into the first stage with an empty material.

    Missing labels write empty strings. The pressure field is only touched
    when a pressure was spoken.

    Returns:
        Index of the filled stage, or None when every stage is taken.
    """
    for idx, stage in enumerate(stages):
        if not stage.is_open:
            continue
        for label, attr in LABEL_FIELDS.items():
            setattr(stage, attr, mapping.get(label, ""))
        if pressure_keyword in mapping:
            stage.pressure = mapping[pressure_keyword]
        logger.info("stage_filled", stage_index=idx, fields=len(mapping))
        return idx

    logger.info("utterance_dropped", reason="no_open_stage", stages=len(stages))
    return None
