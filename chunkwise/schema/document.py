"""Normalized document model: typed blocks in source order."""

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

SourceFormat = Literal["pdf", "docx", "pptx"]


class BlockType(str, Enum):
    """Structural unit kinds produced by the normalizer."""

    HEADING = "heading"
    PARAGRAPH = "paragraph"
    LIST_ITEM = "listItem"
    TABLE = "table"
    CODE = "code"
    SLIDE_TITLE = "slideTitle"
    SLIDE_NOTE = "slideNote"
    PAGE_BREAK = "pageBreak"
    OTHER = "other"


HEADING_TYPES = frozenset({BlockType.HEADING, BlockType.SLIDE_TITLE})
PARAGRAPH_TYPES = frozenset({BlockType.PARAGRAPH, BlockType.LIST_ITEM, BlockType.OTHER})


class SourceMeta(BaseModel):
    """Where a block came from: format, page (PDF/DOCX) or slide (PPTX), plus open extension fields."""

    model_config = ConfigDict(frozen=True)

    source: SourceFormat | None = None
    page: int | None = None
    slide: int | None = None
    extra: dict[str, Any] = Field(default_factory=dict)


class Block(BaseModel):
    """One normalized structural unit carrying both plain text and original markup."""

    model_config = ConfigDict(frozen=True)

    type: BlockType
    level: int | None = Field(default=None, ge=0, description="Heading depth or list nesting depth")
    text: str = Field(..., min_length=1, description="Plain text, whitespace-collapsed")
    html: str = Field(..., description="Original markup of the element")
    meta: SourceMeta = Field(default_factory=SourceMeta)

    @property
    def is_heading(self) -> bool:
        return self.type in HEADING_TYPES


class DocumentStructure(BaseModel):
    """Ordered blocks of one parsed source document. Immutable once produced."""

    model_config = ConfigDict(frozen=True)

    blocks: tuple[Block, ...] = ()
    source_file: str
    source_type: SourceFormat

    def plain_text(self) -> str:
        """Block texts joined by single spaces, in document order."""
        return " ".join(b.text for b in self.blocks)
