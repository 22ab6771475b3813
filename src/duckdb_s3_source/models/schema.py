"""Column type models shared by the prober and the streaming pipeline.

Every column handed to the host carries one of a small set of semantic
types, together with a note on how that type was obtained.
"""

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field

Row = dict[str, Any]
Batch = list[Row]


class SemanticType(StrEnum):
    """Portable column types understood by the host."""

    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"
    DATE = "date"


class TypeFidelity(StrEnum):
    """How a column's semantic type was determined."""

    PRECISE = "precise"  # From the engine's schema description
    INFERRED = "inferred"  # From sampled runtime values


class ColumnDefinition(BaseModel):
    """Output column with its semantic type.

    Attributes:
        name: Column name as reported by the engine.
        semantic_type: Portable semantic type.
        fidelity: Whether the type is authoritative or guessed.
    """

    name: str = Field(..., description="Column name")
    semantic_type: SemanticType = Field(..., description="Portable semantic type")
    fidelity: TypeFidelity = Field(..., description="How the type was determined")

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "name": "amount",
                "semantic_type": "number",
                "fidelity": "precise",
            }
        },
    }
