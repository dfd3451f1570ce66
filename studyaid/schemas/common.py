"""
Shared schema base

The remote study API speaks camelCase; Python attributes stay snake_case.
"""
from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model accepting and emitting camelCase field names"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class MessageResponse(CamelModel):
    """Plain acknowledgement"""
    message: str
