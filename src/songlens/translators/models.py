"""Models for the lyrics segmentation and translation pipeline"""

from dataclasses import dataclass
from operator import add
from typing import Annotated, Optional, TypedDict, Union

from pydantic import BaseModel, ConfigDict, Field


class SectionBoundary(BaseModel):
    """Line range of one song section, 1-indexed and inclusive"""

    model_config = ConfigDict(populate_by_name=True)

    kind: str = Field(alias="type", description="Section label (verse, chorus, ...)")
    start_line: int = Field(alias="startLine", description="First line of the section")
    end_line: int = Field(alias="endLine", description="Last line of the section")


class Section(BaseModel):
    """One translated and analysed section"""

    model_config = ConfigDict(populate_by_name=True)

    kind: str = Field(alias="type", description="Section label (verse, chorus, ...)")
    original_text: str = Field(alias="original", description="Source lyrics")
    translation_text: str = Field(alias="translation", description="Translated lyrics")
    analysis_text: str = Field(
        default="", alias="analysis", description="Meaning and context notes"
    )


class SectionTranslation(BaseModel):
    """Translation stage output for a single section"""

    translation_text: str
    analysis_text: str = ""


@dataclass(frozen=True)
class ParsedOk:
    """Segmentation reply parsed and validated"""

    boundaries: list[SectionBoundary]
    discarded: int = 0


@dataclass(frozen=True)
class ParsedError:
    """Segmentation reply could not be used"""

    reason: str
    raw_response: str
    details: Optional[str] = None


ParseResult = Union[ParsedOk, ParsedError]


class PipelineState(TypedDict):
    """State for the lyrics pipeline graph"""

    # Input
    lyrics: str

    # Segmentation
    boundaries: Optional[list[SectionBoundary]]

    # Extraction
    section_texts: Optional[list[tuple[SectionBoundary, str]]]

    # Translation
    sections: Optional[list[Section]]

    # Control
    messages: Annotated[list, add]
