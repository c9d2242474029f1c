from pydantic import BaseModel, ConfigDict


def _to_camel(string: str) -> str:
    """Convert snake_case to camelCase."""
    components = string.split("_")
    return components[0] + "".join(x.title() for x in components[1:])


class CamelModel(BaseModel):
    """Model serialized with camelCase keys for the frontend."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=_to_camel)
