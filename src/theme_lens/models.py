from enum import Enum, IntEnum

from pydantic import BaseModel, ConfigDict, Field


class Position(BaseModel):
    row: int
    column: int


class SourceKind(str, Enum):
    LIQUID = "liquid"
    JSON = "json"


class Severity(IntEnum):
    ERROR = 0
    WARNING = 1
    INFO = 2


class Offense(BaseModel):
    model_config = ConfigDict(frozen=True)

    check: str
    message: str
    location: str
    kind: SourceKind
    severity: Severity
    start_index: int
    end_index: int
    start: Position
    end: Position


# ---------------------------------------------------------------------------
# Reference catalog entries
# ---------------------------------------------------------------------------


class ReturnType(BaseModel):
    type: str
    name: str = ""
    array_value: str | None = None


class ObjectEntry(BaseModel):
    name: str
    description: str | None = None
    return_type: list[ReturnType] = Field(default_factory=list)
    properties: list["ObjectEntry"] = Field(default_factory=list)


ObjectEntry.model_rebuild()  # necessary for recursive types


class FilterParameter(BaseModel):
    name: str
    positional: bool = False
    required: bool = False
    types: list[str] = Field(default_factory=list)
    description: str | None = None


class FilterEntry(BaseModel):
    name: str
    syntax: str | None = None
    description: str | None = None
    return_type: list[ReturnType] | None = None
    parameters: list[FilterParameter] = Field(default_factory=list)


class TagEntry(BaseModel):
    name: str
    description: str | None = None


# ---------------------------------------------------------------------------
# Editor-facing results
# ---------------------------------------------------------------------------


class CompletionItemKind(IntEnum):
    FUNCTION = 3
    VARIABLE = 6
    PROPERTY = 10
    KEYWORD = 14


class InsertTextFormat(IntEnum):
    PLAIN_TEXT = 1
    SNIPPET = 2


class CompletionItem(BaseModel):
    label: str
    kind: CompletionItemKind
    insert_text: str | None = None
    insert_text_format: InsertTextFormat | None = None
    documentation: str | None = None


class Hover(BaseModel):
    contents: str
