"""Data models for the parse, bind and render pipeline"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


COVER = "cover"
Slot = Union[Literal["cover"], int]     # "cover" or a visual index 1..3


class LineKind(str, Enum):
    """Classification of a single cleaned source line"""
    title = "title"
    quote = "quote"
    highlight = "highlight"
    table = "table"
    image = "image"
    list = "list"
    blank = "blank"
    paragraph = "paragraph"


class ImageStatus(str, Enum):
    pending = "pending"
    ready = "ready"


class RunStatus(str, Enum):
    idle = "idle"
    streaming = "streaming"
    done = "done"
    failed = "failed"


@dataclass(frozen=True)
class ClassifiedLine:
    """One tokenizer output line: its kind and the tag payload (or cleaned text)."""
    kind:    LineKind
    payload: str


class _Block(BaseModel):
    model_config = ConfigDict(frozen=True)


class Title(_Block):
    kind: Literal["title"] = "title"
    text: str


class Quote(_Block):
    kind: Literal["quote"] = "quote"
    text: str


class Highlight(_Block):
    kind: Literal["highlight"] = "highlight"
    text: str


class Table(_Block):
    kind:   Literal["table"] = "table"
    header: list[str]
    rows:   list[list[str]] = []


class ImagePlaceholder(_Block):
    """Reference to visual slot ``index + 1``; bound to image data separately."""
    kind:  Literal["placeholder"] = "placeholder"
    index: int = Field(..., ge=0, description="Zero-based image index")

    @property
    def slot(self) -> int:
        return self.index + 1


class ListGroup(_Block):
    kind:  Literal["list"] = "list"
    items: list[str]


class Spacer(_Block):
    kind: Literal["spacer"] = "spacer"


class Paragraph(_Block):
    kind: Literal["paragraph"] = "paragraph"
    text: str = ""


class BoundImage(_Block):
    """A placeholder (or the cover) annotated with its current image state."""
    kind:   Literal["image"] = "image"
    index:  Optional[int] = None        # None for the cover
    status: ImageStatus = ImageStatus.pending
    data:   Optional[bytes] = None


Block = Annotated[
    Union[Title, Quote, Highlight, Table, ImagePlaceholder, ListGroup, Spacer, Paragraph],
    Field(discriminator="kind"),
]
RenderEntry = Union[Title, Quote, Highlight, Table, BoundImage, ListGroup, Spacer, Paragraph]


@dataclass
class AnchorSet:
    """Anchor descriptions per slot: last-wins values plus first-seen values for fetch dispatch."""
    cover:      Optional[str] = None
    visuals:    dict[int, str] = field(default_factory=dict)
    first_seen: dict[Slot, str] = field(default_factory=dict)

    def record(self, slot: Slot, description: str) -> None:
        if slot == COVER:
            self.cover = description
        else:
            self.visuals[slot] = description
        self.first_seen.setdefault(slot, description)

    def get(self, slot: Slot) -> Optional[str]:
        return self.cover if slot == COVER else self.visuals.get(slot)

    def slots(self) -> list[Slot]:
        """Recorded slots in first-seen order."""
        return list(self.first_seen)

    def as_dict(self) -> dict:
        return {"cover": self.cover, "visuals": {str(k): v for k, v in sorted(self.visuals.items())}}


@dataclass
class ImageTable:
    """Sparse image store: visual slots 1..3 and a separate cover slot."""
    cover:   Optional[bytes] = None
    visuals: dict[int, bytes] = field(default_factory=dict)

    def get(self, slot: Slot) -> Optional[bytes]:
        return self.cover if slot == COVER else self.visuals.get(slot)

    def set(self, slot: Slot, data: bytes) -> None:
        if slot == COVER:
            self.cover = data
        else:
            self.visuals[slot] = data


@dataclass
class ParsedBuffer:
    """Result of one full parse of the raw buffer; not persisted."""
    anchors: AnchorSet
    lines:   list[ClassifiedLine]
    blocks:  list


@dataclass(frozen=True)
class Frame:
    """Render snapshot handed to the presentation layer."""
    run_id:  int
    status:  RunStatus
    anchors: AnchorSet
    cover:   BoundImage
    entries: list = field(default_factory=list)
