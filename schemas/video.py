from datetime import datetime, timezone

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

SCHEMA_VERSION = 1


class VideoRecord(BaseModel):
    """
    Metadata entry for one uploaded video, as persisted in videos.json.

    Legacy entries (no ``schemaVersion``) used ``public_id``, ``secure_url``
    and ``uploadedBy`` and may miss ``views``; they are accepted here and
    default-filled so handlers never special-case old data.
    """

    model_config = ConfigDict(populate_by_name=True)

    schema_version: int = Field(
        SCHEMA_VERSION,
        alias="schemaVersion",
        validation_alias=AliasChoices("schemaVersion", "schema_version"),
    )
    id: str
    title: str = Field(..., min_length=1)
    location_id: str = Field(
        ...,
        alias="locationId",
        validation_alias=AliasChoices("locationId", "public_id"),
    )
    url: str = Field(..., validation_alias=AliasChoices("url", "secure_url"))
    uploader: str = Field(
        "", validation_alias=AliasChoices("uploader", "uploadedBy")
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        alias="createdAt",
        validation_alias=AliasChoices("createdAt", "created_at"),
    )
    duration: float = 0.0
    format: str = ""
    views: int = Field(0, ge=0)

    @field_validator("duration", "views", mode="before")
    @classmethod
    def _missing_as_zero(cls, value):
        if value is None or value == "":
            return 0
        return value

    @field_validator("format", "uploader", mode="before")
    @classmethod
    def _missing_as_empty(cls, value):
        return "" if value is None else value


class UploadResponse(BaseModel):
    message: str
    video: VideoRecord


class ViewResponse(BaseModel):
    message: str
    views: int


class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    status: str
    message: str

