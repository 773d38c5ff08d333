"""Models for speech recognition results."""

from pydantic import BaseModel, Field


class Alternative(BaseModel):
    """One candidate transcript produced by the recognizer."""

    transcript: str = Field(..., description="Recognized text")
    confidence: float = Field(..., ge=0, le=1, description="Recognizer confidence")


class RecognitionResult(BaseModel):
    """A single recognizer result with its ranked alternatives."""

    alternatives: list[Alternative] = Field(
        default_factory=list, description="Alternatives, best first"
    )
    is_final: bool = Field(default=True, description="Whether the result is finalized")


class SelectedAlternative(BaseModel):
    """The alternative picked for an utterance and its heuristic score."""

    alternative: Alternative = Field(..., description="Chosen alternative")
    score: int = Field(..., ge=0, description="Numeral/keyword score")
