"""Turn decoded canvas directives into complete ShapeRecords.

Every shape type has a parameter model whose field defaults keep a shape
visible on a canvas of a few hundred logical units. Fields missing from the
directive (or sent as ``null``) take those defaults, so a materialized record
always carries the full field set of its type.
"""

import logging
from typing import Any, Dict, Optional, Type, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, model_validator

from ai_cofounder.core_models import ShapeRecord, ShapeType
from ai_cofounder.metrics import CANVAS_DIRECTIVES_TOTAL

logger = logging.getLogger(__name__)

Number = Union[int, float]

# --------------------------------------------------------------------------- #
# Per-type parameter models
# --------------------------------------------------------------------------- #

class _ShapeParams(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class RectangleParams(_ShapeParams):
    x: Number = 100
    y: Number = 100
    width: Number = 100
    height: Number = 60
    fillColor: str = Field(default="#3b82f6", validation_alias=AliasChoices("fillColor", "fill"))
    strokeColor: str = Field(default="#1e40af", validation_alias=AliasChoices("strokeColor", "stroke"))


class CircleParams(_ShapeParams):
    x: Number = 200
    y: Number = 150
    radius: Number = 30
    fillColor: str = Field(default="#10b981", validation_alias=AliasChoices("fillColor", "fill"))
    strokeColor: str = Field(default="#059669", validation_alias=AliasChoices("strokeColor", "stroke"))


class TextParams(_ShapeParams):
    x: Number = 100
    y: Number = 50
    content: str = Field(default="Text", validation_alias=AliasChoices("content", "text"))
    fontSize: Number = 16
    fillColor: str = Field(default="#000000", validation_alias=AliasChoices("fillColor", "fill"))


class LineParams(_ShapeParams):
    x1: Number = 50
    y1: Number = 50
    x2: Number = 150
    y2: Number = 150
    strokeColor: str = Field(default="#ef4444", validation_alias=AliasChoices("strokeColor", "stroke"))
    strokeWidth: Number = 3


_PARAM_MODELS: Dict[ShapeType, Type[_ShapeParams]] = {
    ShapeType.RECTANGLE: RectangleParams,
    ShapeType.CIRCLE: CircleParams,
    ShapeType.TEXT: TextParams,
    ShapeType.LINE: LineParams,
}

# Type identifiers the assistant may use, lower-cased.
_TYPE_ALIASES: Dict[str, ShapeType] = {
    "rect": ShapeType.RECTANGLE,
    "rectangle": ShapeType.RECTANGLE,
    "circle": ShapeType.CIRCLE,
    "text": ShapeType.TEXT,
    "line": ShapeType.LINE,
}

SHAPE_DEFAULTS: Dict[ShapeType, Dict[str, Any]] = {
    shape_type: model().model_dump() for shape_type, model in _PARAM_MODELS.items()
}


def resolve_shape_type(type_identifier: str) -> Optional[ShapeType]:
    """Map a directive type identifier (``rect``, ``Circle`` ...) to a ShapeType."""
    return _TYPE_ALIASES.get((type_identifier or "").strip().lower())


def materialize_shape(type_identifier: str, parameters: Dict[str, Any], owner_id: str) -> Optional[ShapeRecord]:
    """Build a ShapeRecord for *owner_id*, or ``None`` if the directive can't be used.

    Unknown type identifiers and parameter values of the wrong kind are logged
    and dropped; neither raises.
    """
    shape_type = resolve_shape_type(type_identifier)
    if shape_type is None:
        logger.info("Dropping canvas directive with unknown shape type %r", type_identifier)
        CANVAS_DIRECTIVES_TOTAL.labels(outcome="unknown_type").inc()
        return None

    try:
        params = _PARAM_MODELS[shape_type].model_validate(parameters or {})
    except ValidationError as e:
        logger.warning("Dropping %s directive with invalid parameters %s: %s", shape_type.value, parameters, e)
        CANVAS_DIRECTIVES_TOTAL.labels(outcome="invalid").inc()
        return None

    return ShapeRecord(type=shape_type, parameters=params.model_dump(), owner_id=str(owner_id))
