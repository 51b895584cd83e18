from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

# Largest value the INTEGER rate-limit columns hold on every supported dialect
MAX_RATE_LIMIT = 2**31 - 1


class CamelModel(BaseModel):
    """Snake_case attributes, camelCase on the wire"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OkResponse(BaseModel):
    ok: bool = True
