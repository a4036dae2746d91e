from typing import Any, ClassVar
from pydantic import BaseModel, model_validator


class PartialUpdate(BaseModel):
    """
    Base for partial update bodies.

    Fields may be omitted, but the ones listed in non_nullable map to NOT NULL
    columns and may not be sent as an explicit null.
    """

    non_nullable: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="before")
    @classmethod
    def reject_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            nulls = [name for name in cls.non_nullable if name in data and data[name] is None]
            if nulls:
                raise ValueError(f"{', '.join(nulls)} cannot be null")
        return data
