"""Convert module schemas."""

from pydantic import BaseModel, ConfigDict, Field


class ConvertRequest(BaseModel):
    """Request to convert HTML or a URL to PDF."""

    model_config = ConfigDict(extra="ignore")

    # Optional here so a missing source is answered with 400, not 422.
    source: str | None = Field(default=None, description="URL or HTML content to convert")
    format: str | None = Field(default=None, description="Page format, e.g. A4, Letter")
    orientation: str | None = Field(default=None, description="portrait or landscape")
    margin: str | int | None = Field(
        default=None,
        description="Margins in mm: 'top,right,bottom,left' or a single value",
    )
    printBackground: str | bool | None = Field(
        default=None,
        description="'true' or 'false'; include background colors and images",
    )
