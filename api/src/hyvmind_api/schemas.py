"""Shared request/response base models (camelCase on the wire)."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class CustomAttributeIn(CamelModel):
    key: str
    value: str


class NodeIdResponse(CamelModel):
    id: str
