from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class GolfModel(BaseModel):
    """Base for every record: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        use_enum_values=True,
    )

    def to_record(self) -> dict:
        """Plain dict for the JSON store (snake_case keys, JSON-safe values)."""
        return self.model_dump(mode="json")
