from pydantic import BaseModel, Field


def split_param(value: str | None) -> list[str]:
    """
    Splits a comma separated query parameter, an absent parameter giving an empty list.
    """
    if value is None:
        return []
    return value.split(',')


class QueryFilters(BaseModel):
    """
    Field constraints for listing data centers. An empty list places no constraint on that field, it does not
    mean "match nothing".
    """
    country: list[str] = Field(default_factory=list)
    name: list[str] = Field(default_factory=list)
    centerId: list[str] = Field(default_factory=list)
    type: list[str] = Field(default_factory=list)

    @classmethod
    def from_query_params(
            cls,
            country: str | None = None,
            name: str | None = None,
            center_id: str | None = None,
            type_: str | None = None,
    ) -> 'QueryFilters':
        return cls(
            country=split_param(country),
            name=split_param(name),
            centerId=split_param(center_id),
            type=split_param(type_),
        )

    def is_empty(self) -> bool:
        return not (self.country or self.name or self.centerId or self.type)
