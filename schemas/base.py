from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class RequestSchema(BaseModel):
    """camelCase on the wire, snake_case accepted too; unknown keys ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )

    def supplied(self):
        """Only the fields the client actually sent."""
        return self.model_dump(exclude_unset=True)
