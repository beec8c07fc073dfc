"""Tests for the HTTP API."""

import base64
import io

import numpy as np
import pytest
from PIL import Image
from fastapi.testclient import TestClient

from bitone.api.main import app
from bitone.api.routes import dither as dither_routes
from bitone.dithering import apply_threshold_dithering

from conftest import decode_to_array, encode_png


@pytest.fixture
def client():
    return TestClient(app)


def post_image(client, data, **form):
    return client.post(
        "/dither",
        files={"image_file": ("input.png", data, "image/png")},
        data=form,
    )


class TestHealth:
    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "Bitone API"
        assert body["status"] == "online"

    def test_list_algorithms(self, client):
        response = client.get("/dither/algorithms")
        assert response.status_code == 200
        body = response.json()
        ids = [algorithm["id"] for algorithm in body["algorithms"]]
        assert ids == ["floyd-steinberg", "atkinson", "ordered", "threshold"]
        assert body["default"] == "floyd-steinberg"
        assert body["fallback"] == "threshold"
        assert body["defaultThreshold"] == 128


class TestDitherUpload:
    @pytest.mark.parametrize(
        "algorithm", ["floyd-steinberg", "atkinson", "ordered", "threshold"]
    )
    def test_returns_binary_png(self, client, gradient_grid, algorithm):
        response = post_image(client, encode_png(gradient_grid), algorithm=algorithm)

        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"
        assert response.headers["x-dither-algorithm"] == algorithm

        result = decode_to_array(response.content)
        assert result.shape == gradient_grid.shape
        assert set(np.unique(result)) <= {0, 255}

    def test_floyd_steinberg_fixture(self, client):
        data = encode_png([[100, 150], [200, 50]])
        response = post_image(client, data, algorithm="floyd-steinberg")
        assert decode_to_array(response.content).tolist() == [[0, 255], [255, 0]]

    def test_default_algorithm(self, client, gradient_grid):
        response = post_image(client, encode_png(gradient_grid))
        assert response.status_code == 200
        assert response.headers["x-dither-algorithm"] == "floyd-steinberg"

    def test_unknown_algorithm_falls_back_to_threshold(self, client, random_grid):
        response = post_image(client, encode_png(random_grid), algorithm="nonexistent")

        assert response.status_code == 200
        assert response.headers["x-dither-algorithm"] == "threshold"
        expected = apply_threshold_dithering(random_grid, 128)
        assert np.array_equal(decode_to_array(response.content), expected)

    def test_custom_threshold(self, client):
        data = encode_png([[40, 60]])
        response = post_image(client, data, algorithm="threshold", threshold="50")
        assert decode_to_array(response.content).tolist() == [[0, 255]]

    def test_color_image(self, client):
        data = encode_png(np.full((3, 5, 3), 255, dtype=np.uint8))
        response = post_image(client, data, algorithm="ordered")
        assert decode_to_array(response.content).shape == (3, 5)

    def test_sixteen_bit_image(self, client):
        # 20000 / 257 -> 78, dark enough to stay black
        samples = np.full((2, 3), 20000, dtype=np.uint16)
        buffer = io.BytesIO()
        Image.fromarray(samples).save(buffer, format="PNG")

        response = post_image(client, buffer.getvalue(), algorithm="threshold")
        assert response.status_code == 200
        assert decode_to_array(response.content).tolist() == [[0, 0, 0], [0, 0, 0]]

    def test_too_many_pixels(self, client, gradient_grid, monkeypatch):
        monkeypatch.setattr(dither_routes, "MAX_PIXELS", 100)
        response = post_image(client, encode_png(gradient_grid))
        assert response.status_code == 400
        assert "too large" in response.json()["detail"]

    def test_output_format(self, client, gradient_grid):
        response = post_image(client, encode_png(gradient_grid), output_format="bmp")
        assert response.status_code == 200
        assert response.headers["content-type"] == "image/bmp"
        assert "dithered.bmp" in response.headers["content-disposition"]

    def test_single_pixel(self, client):
        response = post_image(client, encode_png([[7]]), algorithm="atkinson")
        assert decode_to_array(response.content).tolist() == [[0]]

    def test_invalid_image(self, client):
        response = post_image(client, b"not an image")
        assert response.status_code == 400
        assert "Invalid image file" in response.json()["detail"]

    def test_unsupported_output_format(self, client, gradient_grid):
        response = post_image(client, encode_png(gradient_grid), output_format="xcf")
        assert response.status_code == 400

    def test_threshold_out_of_range(self, client, gradient_grid):
        response = post_image(client, encode_png(gradient_grid), threshold="300")
        assert response.status_code == 422

    def test_missing_file(self, client):
        response = client.post("/dither", data={"algorithm": "ordered"})
        assert response.status_code == 422


class TestDitherJson:
    def test_returns_image_and_statistics(self, client):
        data = encode_png([[100, 150], [200, 50]])
        response = client.post(
            "/dither/json",
            json={
                "image": base64.b64encode(data).decode("ascii"),
                "algorithm": "floyd-steinberg",
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert body["algorithm"] == "floyd-steinberg"
        assert body["width"] == 2
        assert body["height"] == 2
        assert body["format"] == "png"
        assert body["threshold"] is None
        assert body["blackPixels"] == 2
        assert body["whitePixels"] == 2

        result = decode_to_array(base64.b64decode(body["image"]))
        assert result.tolist() == [[0, 255], [255, 0]]

    def test_accepts_data_url(self, client):
        data = encode_png([[255, 0]])
        response = client.post(
            "/dither/json",
            json={
                "image": "data:image/png;base64," + base64.b64encode(data).decode(),
                "algorithm": "threshold",
            },
        )
        assert response.status_code == 200
        assert response.json()["whitePixels"] == 1

    def test_unknown_algorithm(self, client):
        data = encode_png([[129, 128]])
        response = client.post(
            "/dither/json",
            json={"image": base64.b64encode(data).decode(), "algorithm": "nonexistent"},
        )
        body = response.json()
        assert body["algorithm"] == "threshold"
        assert body["threshold"] == 128
        assert body["whitePixels"] == 1

    def test_threshold_reported_for_threshold_dithering(self, client):
        data = encode_png([[40, 60]])
        response = client.post(
            "/dither/json",
            json={
                "image": base64.b64encode(data).decode(),
                "algorithm": "threshold",
                "threshold": 50,
            },
        )
        body = response.json()
        assert body["threshold"] == 50
        assert body["whitePixels"] == 1

    def test_threshold_omitted_for_ordered(self, client):
        data = encode_png([[40, 60]])
        response = client.post(
            "/dither/json",
            json={
                "image": base64.b64encode(data).decode(),
                "algorithm": "ordered",
                "threshold": 50,
            },
        )
        assert response.json()["threshold"] is None

    def test_invalid_base64(self, client):
        response = client.post("/dither/json", json={"image": "!!not base64!!"})
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid base64 image data"

    def test_invalid_image(self, client):
        response = client.post(
            "/dither/json",
            json={"image": base64.b64encode(b"garbage").decode()},
        )
        assert response.status_code == 400

    def test_missing_image(self, client):
        response = client.post("/dither/json", json={"algorithm": "ordered"})
        assert response.status_code == 422
