import mimetypes
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from ..errors import InputValidationError


class ChartKind(str, Enum):
    """Chart kinds the solver may ask for."""

    BAR = "bar"
    LINE = "line"


class ChartPoint(BaseModel):
    """A single named data point of a chart."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Category or x-axis label")
    value: float = Field(description="Numeric value plotted for this point")


class ChartData(BaseModel):
    """Chart descriptor returned alongside a solution."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: ChartKind = Field(description="Chart kind: 'bar' or 'line'")
    data: list[ChartPoint] = Field(default_factory=list, description="Points in display order")
    data_key: str = Field(
        default="value",
        alias="dataKey",
        description="Name of the value field (always 'value')"
    )


class SolveResult(BaseModel):
    """Structured answer to an exercise."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    solution: str = Field(description="Step-by-step solution in Markdown")
    explanation: str = Field(description="Concise explanation of the key concept")
    chart_data: ChartData | None = Field(
        default=None,
        alias="chartData",
        description="Optional chart for quantifiable results"
    )


class Source(BaseModel):
    """A grounding chunk (web citation) attached to a search answer."""

    model_config = ConfigDict(frozen=True)

    uri: str
    title: str = ""

    @property
    def label(self) -> str:
        """Text to show for this source: the title, or the URI if untitled."""
        return self.title or self.uri


class SearchResult(BaseModel):
    """Web-grounded answer with its citations."""

    model_config = ConfigDict(frozen=True)

    answer: str = Field(description="Answer text")
    sources: list[Source] = Field(default_factory=list, description="Citations in provider order")


class ImageInput(BaseModel):
    """Inline image attached to an exercise."""

    model_config = ConfigDict(frozen=True)

    data: bytes = Field(repr=False)
    mime_type: str = Field(description="MIME type, e.g. image/png")
    name: str = Field(default="image", description="Display name (file name)")

    @classmethod
    def from_path(cls, path: str | Path) -> "ImageInput":
        """Load an image file.

        Raises:
            InputValidationError: If the file is missing or not an image
        """
        file_path = Path(path).expanduser()
        if not file_path.is_file():
            raise InputValidationError(f"Image not found: {file_path}")

        mime_type, _ = mimetypes.guess_type(file_path.name)
        if not mime_type or not mime_type.startswith("image/"):
            raise InputValidationError(f"Not an image file: {file_path.name}")

        return cls(data=file_path.read_bytes(), mime_type=mime_type, name=file_path.name)


class LiveEventType(str, Enum):
    """Kinds of inbound events on a live session."""

    INPUT_TRANSCRIPT = "input_transcript"
    OUTPUT_TRANSCRIPT = "output_transcript"
    AUDIO = "audio"
    TURN_COMPLETE = "turn_complete"


class LiveEvent(BaseModel):
    """Provider-neutral inbound event from a live session."""

    model_config = ConfigDict(frozen=True)

    type: LiveEventType
    text: str = ""
    audio: bytes = Field(default=b"", repr=False, description="24kHz mono PCM16 chunk")
