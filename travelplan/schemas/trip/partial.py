from pydantic import BaseModel, model_validator
from typing import Any, ClassVar, Dict, Tuple


class PartialUpdate(BaseModel):
    """
    Body of a PUT that only changes the fields the client sent.

    Fields listed in `not_null` may be left out but cannot be sent as null,
    since their columns require a value.
    """
    not_null: ClassVar[Tuple[str, ...]] = ()

    @model_validator(mode="after")
    def check_not_null(self):
        for field in self.not_null:
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)
