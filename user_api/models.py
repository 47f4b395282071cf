"""
Domain models for USER_API.

Entities are pydantic models. Field constraints declared here are the
validation rules for the User resource; ``user_api.validation`` turns their
failures into a per-field report.

Example:
    user = User(name="John Doe", username="johndoe", email="johndoe@example.com")
    doc = user.to_document()   # ready for insert_one
    same = User.from_document(doc)
"""

from collections.abc import Mapping
from typing import Any, Optional, get_args

from bson import ObjectId
from pydantic import (
    AnyUrl,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from .constants import (
    COMPANY_NAME_MAX_LENGTH,
    COMPANY_NAME_MIN_LENGTH,
    COORDINATE_PATTERN,
    NAME_MAX_LENGTH,
    NAME_MIN_LENGTH,
    USERNAME_MAX_LENGTH,
    USERNAME_MIN_LENGTH,
    WEBSITE_SCHEMES,
)

_URL_ADAPTER = TypeAdapter(AnyUrl)


def is_valid_object_id(value: Any) -> bool:
    """Return True if value is an ObjectId or its 24-character hex rendering."""
    if isinstance(value, ObjectId):
        return True
    return isinstance(value, str) and len(value) == 24 and ObjectId.is_valid(value)


def to_object_id_filter(id: str) -> dict[str, Any]:
    """
    Build an equality filter on ``_id``.

    Valid hex strings are converted to ObjectId; anything else is matched
    verbatim, which simply matches nothing in a collection keyed by ObjectId.
    """
    return {"_id": ObjectId(id) if is_valid_object_id(id) else id}


class Document(BaseModel):
    """
    Base class for stored entities.

    Maps the public ``id`` attribute to the store's ``_id`` key.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Optional[str] = None

    @classmethod
    def _id_to_store(cls, value: str) -> Any:
        return value

    def to_document(self) -> dict[str, Any]:
        """Convert the entity to a document for storage."""
        data = self.model_dump(by_alias=True, exclude_none=True)
        doc: dict[str, Any] = {}
        id = data.pop("id", None)
        if id is not None:
            doc["_id"] = self._id_to_store(id)
        doc.update(data)
        return doc

    @classmethod
    def from_document(cls, doc: dict[str, Any] | None):
        """
        Create an entity from a stored document, or None.

        Field rules are not re-checked: they guard writes, and a document
        stored before a rule changed must still be readable.
        """
        if doc is None:
            return None
        data = dict(doc)
        if "_id" in data:
            data["id"] = str(data.pop("_id"))
        return _construct(cls, data)

    def to_api(self) -> dict[str, Any]:
        """JSON-ready representation used by the HTTP layer."""
        return self.model_dump(by_alias=True, exclude_none=True)


def _nested_model(annotation: Any) -> type[BaseModel] | None:
    for candidate in (annotation, *get_args(annotation)):
        if isinstance(candidate, type) and issubclass(candidate, BaseModel):
            return candidate
    return None


def _construct(model: type[BaseModel], data: Mapping[str, Any]) -> BaseModel:
    """Build ``model`` from stored data without validation, recursing into sub-models."""
    values: dict[str, Any] = {}
    for name, field in model.model_fields.items():
        key = field.alias if field.alias and field.alias in data else name
        if key not in data:
            if field.is_required():
                values[name] = None
            continue
        value = data[key]
        nested = _nested_model(field.annotation)
        if nested is not None and isinstance(value, Mapping):
            value = _construct(nested, value)
        values[name] = value
    return model.model_construct(**values)


class Geo(BaseModel):
    lat: str = Field(..., pattern=COORDINATE_PATTERN)
    lng: str = Field(..., pattern=COORDINATE_PATTERN)


class Address(BaseModel):
    street: Optional[str] = None
    suite: Optional[str] = None
    city: Optional[str] = None
    zipcode: Optional[str] = None
    geo: Optional[Geo] = None


class Company(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=COMPANY_NAME_MIN_LENGTH, max_length=COMPANY_NAME_MAX_LENGTH)
    catch_phrase: Optional[str] = Field(default=None, alias="catchPhrase")
    bs: Optional[str] = None


class User(Document):
    """
    The User resource.

    ``id`` is None until the store assigns one on insert.
    """

    name: str = Field(..., min_length=NAME_MIN_LENGTH, max_length=NAME_MAX_LENGTH)
    username: str = Field(..., min_length=USERNAME_MIN_LENGTH, max_length=USERNAME_MAX_LENGTH)
    email: EmailStr
    address: Optional[Address] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    company: Optional[Company] = None

    @field_validator("id", mode="before")
    @classmethod
    def _check_id(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        if not is_valid_object_id(value):
            raise ValueError("id must be a 24-character hex ObjectId")
        return str(ObjectId(value))

    @field_validator("website")
    @classmethod
    def _check_website(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        try:
            url = _URL_ADAPTER.validate_python(value)
        except ValidationError:
            raise ValueError("website must be a fully-qualified http, https, or ftp URL") from None
        if url.scheme not in WEBSITE_SCHEMES:
            raise ValueError("website must be a fully-qualified http, https, or ftp URL")
        return value

    @classmethod
    def _id_to_store(cls, value: str) -> Any:
        return ObjectId(value)


class Counter(Document):
    """A named monotonic sequence; ``id`` is the sequence name."""

    id: str
    seq: int = 0
