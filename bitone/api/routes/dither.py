"""
API route handlers for dithering operations.

This module defines the FastAPI endpoints for:
- Listing the available dithering algorithms
- Dithering an uploaded image and returning it as an image
- Dithering a base64-encoded image and returning JSON
"""

import asyncio
import base64
import binascii
import logging
import time
import uuid

from fastapi import APIRouter, File, Form, HTTPException, UploadFile, status
from fastapi.responses import Response

from bitone.api.config import (
    DEFAULT_ALGORITHM,
    DEFAULT_OUTPUT_FORMAT,
    DEFAULT_THRESHOLD,
    LARGE_IMAGE_PIXELS,
    MAX_FILE_SIZE,
    MAX_PIXELS,
)
from bitone.api.models import (
    AlgorithmInfo,
    AlgorithmListResponse,
    DitherRequest,
    DitherResponse,
)
from bitone.dithering import (
    ALGORITHMS,
    DitherAlgorithm,
    apply_dithering,
    resolve_algorithm,
)
from bitone.image_ops import (
    decode_grid,
    encode_grid,
    extension_for,
    media_type_for,
    normalize_format,
)
from bitone.metadata import count_levels

# Set up logging
logger = logging.getLogger("bitone.api.routes.dither")

# Initialize router
router = APIRouter(prefix="/dither", tags=["dither"])


def dither_image_bytes(image_data, algorithm_name, threshold, output_format):
    """
    Decode, dither and re-encode one image.

    Args:
        image_data: Encoded input image bytes
        algorithm_name: Requested algorithm identifier
        threshold: Threshold for threshold dithering
        output_format: Output format name

    Returns:
        Dictionary with the encoded image, the resolved algorithm, the
        dithered grid and the dithering time

    Raises:
        ValueError: For undecodable input, oversized images or unknown formats
    """
    image_format = normalize_format(output_format)
    algorithm = resolve_algorithm(algorithm_name)

    grid = decode_grid(image_data, max_pixels=MAX_PIXELS)
    height, width = grid.shape
    pixel_count = width * height
    if pixel_count > LARGE_IMAGE_PIXELS:
        logger.warning(f"Large image requested: {width}x{height} = {pixel_count} pixels")

    start_time = time.time()
    result = apply_dithering(grid, algorithm, threshold)
    processing_time = time.time() - start_time

    logger.info(
        f"{algorithm.value} dithering took {processing_time:.2f} seconds for {width}x{height} image"
    )

    return {
        "data": encode_grid(result, image_format),
        "format": image_format,
        "algorithm": algorithm,
        "grid": result,
        "processing_time": processing_time,
    }


async def run_dithering(image_data, algorithm_name, threshold, output_format):
    """
    Run dither_image_bytes in the default executor and map errors to HTTP errors.

    Raises:
        HTTPException(400): If the image or parameters are invalid
        HTTPException(500): If encoding fails or any other error occurs
    """
    try:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None,
            dither_image_bytes,
            image_data,
            algorithm_name,
            threshold,
            output_format,
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    except Exception as e:
        logger.error(f"Error dithering image: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error dithering image: {str(e)}",
        )


@router.get(
    "/algorithms",
    response_model=AlgorithmListResponse,
    summary="List Dithering Algorithms",
)
async def list_algorithms() -> AlgorithmListResponse:
    """
    List the available dithering algorithms.

    Unknown algorithm identifiers are accepted by the dither endpoints and
    resolve to the fallback algorithm.
    """
    return AlgorithmListResponse(
        algorithms=[
            AlgorithmInfo(
                id=algorithm.value,
                name=info["name"],
                description=info["description"],
            )
            for algorithm, info in ALGORITHMS.items()
        ],
        default=DitherAlgorithm.get_default().value,
        fallback=DitherAlgorithm.get_fallback().value,
        defaultThreshold=DEFAULT_THRESHOLD,
    )


@router.post(
    "",
    summary="Dither Image",
    description="Converts an uploaded image to grayscale and dithers it to pure black and white. "
    "Returns the result directly as an image. Unknown algorithms fall back to threshold dithering.",
    response_description="Dithered image",
    responses={
        200: {
            "description": "Dithered image",
            "content": {"image/png": {"schema": {"type": "string", "format": "binary"}}},
        },
        400: {
            "description": "Bad Request - Invalid image file or output format",
            "content": {
                "application/json": {"example": {"detail": "Invalid image file: ..."}}
            },
        },
        413: {
            "description": "File too large",
            "content": {
                "application/json": {
                    "example": {
                        "detail": "Request content length exceeds the maximum allowed size"
                    }
                }
            },
        },
    },
)
async def dither_upload(
    image_file: UploadFile = File(..., description="Image file to dither"),
    algorithm: str = Form(
        DEFAULT_ALGORITHM,
        description="Dithering algorithm (floyd-steinberg, atkinson, ordered, threshold)",
    ),
    threshold: int = Form(
        DEFAULT_THRESHOLD, ge=0, le=255, description="Threshold for threshold dithering"
    ),
    output_format: str = Form(DEFAULT_OUTPUT_FORMAT, description="Output image format"),
):
    """
    Dither an uploaded image and return the encoded result.

    Raises:
        HTTPException(400): If the image is invalid or the format unsupported
        HTTPException(413): If the file is too large
        HTTPException(500): If there's an internal server error
    """
    request_id = str(uuid.uuid4())[:8]
    logger.info(f"[REQ-{request_id}] Dither request with algorithm '{algorithm}'")

    image_data = await image_file.read()
    if len(image_data) > MAX_FILE_SIZE:
        logger.warning(f"[REQ-{request_id}] File too large: {len(image_data)} bytes")
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File size {len(image_data)} bytes exceeds limit of {MAX_FILE_SIZE} bytes.",
        )

    result = await run_dithering(image_data, algorithm, threshold, output_format)

    return Response(
        content=result["data"],
        media_type=media_type_for(result["format"]),
        headers={
            "Content-Disposition": f"inline; filename=dithered{extension_for(result['format'])}",
            "X-Dither-Algorithm": result["algorithm"].value,
        },
    )


@router.post(
    "/json",
    response_model=DitherResponse,
    summary="Dither Base64 Image",
    description="Dithers a base64-encoded image and returns the result and statistics as JSON.",
)
async def dither_json(request: DitherRequest) -> DitherResponse:
    """
    Dither a base64-encoded image.

    Raises:
        HTTPException(400): If the base64 data or the image is invalid
        HTTPException(413): If the decoded image is too large
        HTTPException(500): If there's an internal server error
    """
    encoded = request.image
    # Accept data URLs such as "data:image/png;base64,..."
    if encoded.startswith("data:") and "," in encoded:
        encoded = encoded.split(",", 1)[1]

    try:
        image_data = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid base64 image data",
        )

    if len(image_data) > MAX_FILE_SIZE:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Image size {len(image_data)} bytes exceeds limit of {MAX_FILE_SIZE} bytes.",
        )

    result = await run_dithering(
        image_data, request.algorithm, request.threshold, request.output_format
    )

    height, width = result["grid"].shape
    black, white = count_levels(result["grid"])

    return DitherResponse(
        algorithm=result["algorithm"].value,
        width=width,
        height=height,
        format=result["format"],
        threshold=(
            request.threshold
            if result["algorithm"] is DitherAlgorithm.THRESHOLD
            else None
        ),
        processingTime=result["processing_time"],
        blackPixels=black,
        whitePixels=white,
        image=base64.b64encode(result["data"]).decode("ascii"),
    )
