"""Response envelopes shared by every endpoint: ``{success, ...}``."""

from pydantic import BaseModel, ConfigDict, Field


class SuccessResponse(BaseModel):
    success: bool = True
    warnings: list[str] | None = None


class UploadResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    image_url: str = Field(..., alias="imageUrl")


class ImageDeleteRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    image_url: str | None = Field(None, alias="imageUrl")


class HealthResponse(BaseModel):
    success: bool = True
    message: str
    database: str
    config: dict
