# backend/schemas/common.py
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


# Base configuration: ORM compatibility and camelCase JSON keys
class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)


# Upper bound for the quantity of a single cart or order line
MAX_LINE_QUANTITY = 10_000


class SuccessResponse(ORMBase):
    success: bool = True
