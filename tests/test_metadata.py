"""
Tests for the dithering metadata format.
"""

import numpy as np

from bitone.metadata import (
    count_levels,
    create_metadata,
    load_metadata_json,
    save_metadata_json,
)


def test_count_levels():
    grid = np.array([[0, 255, 255], [0, 0, 255]], dtype=np.uint8)
    assert count_levels(grid) == (3, 3)


def test_create_metadata():
    grid = np.array([[0, 255], [255, 255]], dtype=np.uint8)
    metadata = create_metadata(
        width=2,
        height=2,
        algorithm_name="threshold",
        processing_time=0.1,
        grid=grid,
        threshold=100,
        original_image_path="/images/test_image.png",
        output_image_path="./out/dithered/test_output.png",
        image_format="png",
    )

    assert metadata["dimensions"] == {"width": 2, "height": 2}
    assert metadata["algorithm"] == "threshold"
    assert metadata["threshold"] == 100
    assert metadata["pixels"] == {"black": 1, "white": 3}
    assert metadata["original_image"] == "test_image.png"
    assert metadata["output_image"] == "test_output.png"
    assert "timestamp" in metadata


def test_optional_fields_are_omitted():
    metadata = create_metadata(
        width=4, height=4, algorithm_name="ordered", processing_time=0.0
    )
    assert "threshold" not in metadata
    assert "pixels" not in metadata
    assert "original_image" not in metadata


def test_save_and_load_metadata(tmp_path):
    metadata = create_metadata(
        width=1, height=1, algorithm_name="atkinson", processing_time=0.5
    )
    json_path = save_metadata_json(metadata, str(tmp_path / "image.png"))

    assert json_path == str(tmp_path / "image.json")
    assert load_metadata_json(json_path) == metadata
