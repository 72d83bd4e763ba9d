from typing import Annotated, Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import (
    AfterValidator, BaseModel, ConfigDict, Field, field_validator,
)


def _strip_non_empty(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("must not be empty")
    return v


def _check_email(v: str) -> str:
    # syntax only; the address is stored exactly as sent
    try:
        validate_email(v, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValueError(str(e)) from e
    return v


NonEmptyStr = Annotated[str, AfterValidator(_strip_non_empty)]
Email = Annotated[str, AfterValidator(_check_email)]
StrictPositiveInt = Annotated[int, Field(strict=True, gt=0)]


class PersonCreate(BaseModel):
    name: NonEmptyStr
    dob: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[Email] = None
    notes: Optional[str] = None
    group_tag: Optional[str] = None


class PersonUpdate(BaseModel):
    """Partial update. Only fields present in the request body are applied;
    ``model_fields_set`` tells "not sent" apart from an explicit null."""
    name: Optional[NonEmptyStr] = None
    dob: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[Email] = None
    notes: Optional[str] = None
    group_tag: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_null(cls, v):
        # only reached when the client sent "name"; defaults are not validated
        if v is None:
            raise ValueError("name cannot be cleared")
        return v


class PersonOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    dob: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    notes: Optional[str] = None
    group_tag: Optional[str] = None


class RelCreate(BaseModel):
    person_id: StrictPositiveInt
    related_person_id: StrictPositiveInt
    relationship_type: NonEmptyStr


class RelationshipOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    person_id: int
    related_person_id: int
    relationship_type: str


class NetworkNode(BaseModel):
    id: int
    label: str
    group: str
    shape: Optional[str] = None


class NetworkEdge(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_: int = Field(alias="from")
    to: int
    label: str


class NetworkOut(BaseModel):
    nodes: list[NetworkNode]
    edges: list[NetworkEdge]


class SeedOut(BaseModel):
    ok: bool
    ids: dict[str, int]
