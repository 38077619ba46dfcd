from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class DataCenter(BaseModel):
    """
    A registered data center: who runs it, where it is, and the service endpoints it exposes.

    `id` is assigned by the store on create and is required on update. Unknown fields are rejected so that typos in
    a submitted record surface as a 400 rather than being silently dropped.
    """
    model_config = ConfigDict(extra='forbid')

    id: str | None = None
    centerId: str = Field(min_length=1)
    name: str = Field(min_length=1)
    organization: str = Field(min_length=1)
    email: EmailStr
    country: str = Field(min_length=1)
    type: str = Field(min_length=1)
    uiUrl: str | None = None
    gatewayUrl: str | None = None
    analysisSongCode: str | None = None
    analysisSongUrl: str | None = None
    analysisScoreUrl: str | None = None
    submissionSongCode: str | None = None
    submissionSongUrl: str | None = None
    submissionScoreUrl: str | None = None

    def to_document(self) -> dict[str, Any]:
        """
        The stored form of the record, without the id (the store keeps that as `_id`).
        """
        return self.model_dump(exclude={'id'}, exclude_none=True)

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> 'DataCenter':
        """
        Builds a record from its stored form. Stored fields the model does not know (e.g. a `__v` version key
        written by other clients) are dropped rather than rejected.
        """
        fields = {k: v for k, v in document.items() if k in cls.model_fields}
        fields['id'] = str(document['_id'])
        return cls.model_validate(fields)
