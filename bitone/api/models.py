"""
Pydantic models for the Bitone API.

These models define the data structures used for API requests and responses.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from bitone.api.config import (
    DEFAULT_ALGORITHM,
    DEFAULT_OUTPUT_FORMAT,
    DEFAULT_THRESHOLD,
)


class DitherRequest(BaseModel):
    """Request model for dithering a base64-encoded image."""

    image: str = Field(..., description="Base64-encoded image data")
    algorithm: str = Field(
        default=DEFAULT_ALGORITHM,
        description="Dithering algorithm (floyd-steinberg, atkinson, ordered, threshold). "
        "Unknown values fall back to threshold.",
    )
    threshold: int = Field(
        default=DEFAULT_THRESHOLD,
        ge=0,
        le=255,
        description="Threshold for threshold dithering",
    )
    output_format: str = Field(
        default=DEFAULT_OUTPUT_FORMAT, description="Output image format"
    )


class DitherResponse(BaseModel):
    """Response model for a dithered image returned as JSON."""

    algorithm: str = Field(..., description="Algorithm actually applied")
    width: int = Field(..., description="Image width in pixels")
    height: int = Field(..., description="Image height in pixels")
    format: str = Field(..., description="Encoded image format")
    threshold: Optional[int] = Field(
        default=None,
        description="Threshold applied, only set when threshold dithering was used",
    )
    processingTime: float = Field(..., description="Dithering time in seconds")
    blackPixels: int = Field(..., description="Number of black pixels")
    whitePixels: int = Field(..., description="Number of white pixels")
    image: str = Field(..., description="Base64-encoded dithered image")


class AlgorithmInfo(BaseModel):
    """Information about an available dithering algorithm."""

    id: str = Field(..., description="Algorithm identifier")
    name: str = Field(..., description="Human-readable name")
    description: str = Field(..., description="Short description")


class AlgorithmListResponse(BaseModel):
    """Response model listing the available algorithms."""

    algorithms: List[AlgorithmInfo] = Field(default_factory=list)
    default: str = Field(..., description="Algorithm used when none is given")
    fallback: str = Field(..., description="Algorithm used for unknown identifiers")
    defaultThreshold: int = Field(..., description="Default threshold value")
