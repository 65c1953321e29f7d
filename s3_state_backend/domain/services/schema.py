"""Backend configuration schema, derived from the configuration models."""
import types
import typing
from typing import Any, Union

from pydantic import BaseModel
from pydantic.fields import FieldInfo

from s3_state_backend.domain.entities.backend_config import BackendConfig


class AttributeSchema(BaseModel):
    """Description of one configuration attribute."""
    name: str
    type: str
    required: bool = False
    optional: bool = True
    deprecated: bool = False
    sensitive: bool = False
    description: str = ""
    attributes: dict[str, "AttributeSchema"] | None = None
    """Nested attributes for object-typed attributes."""


def config_schema(model: type[BaseModel] = BackendConfig) -> dict[str, AttributeSchema]:
    """
    Describe the attributes accepted by `model`.
    
    Returns:
        Mapping of attribute name to its schema, in declaration order
    """
    return {name: _attribute(name, field) for name, field in model.model_fields.items()}


def _attribute(name: str, field: FieldInfo) -> AttributeSchema:
    extra = field.json_schema_extra if isinstance(field.json_schema_extra, dict) else {}
    annotation = _strip_optional(field.annotation)
    required = field.is_required() or bool(extra.get("required"))

    nested = None
    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        nested = config_schema(annotation)

    return AttributeSchema(
        name=name,
        type=_type_name(annotation),
        required=required,
        optional=not required,
        deprecated=bool(extra.get("deprecated")),
        sensitive=bool(extra.get("sensitive")),
        description=field.description or "",
        attributes=nested,
    )


def _strip_optional(annotation: Any) -> Any:
    if typing.get_origin(annotation) in (Union, types.UnionType):
        args = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def _type_name(annotation: Any) -> str:
    origin = typing.get_origin(annotation)
    if origin is list:
        return "set of string"
    if origin is dict:
        return "map of string"
    if annotation is bool:
        return "bool"
    if annotation is int:
        return "number"
    if annotation is str:
        return "string"
    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        return "object"
    return str(annotation)
