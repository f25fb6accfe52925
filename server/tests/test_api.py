"""
pytest test suite for the HTTP routes.

The app is built with explicit settings and fake vendor clients, so no
credentials or network access are needed.
"""

from __future__ import annotations

import io
import json
from typing import List, Optional, Tuple

import httpx
import pytest
from fastapi.testclient import TestClient
from PIL import Image

from imgtoolbox import create_app
from imgtoolbox.clients import ArkClient, RemoveBgClient, VendorClients
from imgtoolbox.core.config import Settings
from imgtoolbox.core.errors import UpstreamError
from imgtoolbox.models.images import DescriptionResult, GenerationResult, ImageBuffer


# ============================================================================
# FAKES + FIXTURES
# ============================================================================

class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler) -> None:
        self.requests: List[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            request.read()
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)


class FakeGenerator:
    def __init__(self, result: Optional[GenerationResult] = None, error: Optional[Exception] = None) -> None:
        self.result = result or GenerationResult(
            image_url="https://cdn.example.com/out.png",
            revised_prompt="a fluffy cat",
            usage={"generated_images": 1},
        )
        self.error = error
        self.calls: List[Tuple[str, str]] = []

    async def generate(self, prompt: str, size: str = "2K") -> GenerationResult:
        self.calls.append((prompt, size))
        if self.error:
            raise self.error
        return self.result


class FakeDescriber:
    def __init__(self, error: Optional[Exception] = None) -> None:
        self.error = error
        self.calls: List[Tuple[ImageBuffer, Optional[str]]] = []

    async def describe(self, image: ImageBuffer, prompt: Optional[str] = None) -> DescriptionResult:
        self.calls.append((image, prompt))
        if self.error:
            raise self.error
        return DescriptionResult(text="A cat on a sofa.", usage={"total_tokens": 12})


class FakeRemover:
    def __init__(self, output: bytes = b"\x89PNG\r\n\x1a\nno-background", error: Optional[Exception] = None) -> None:
        self.output = output
        self.error = error
        self.calls: List[ImageBuffer] = []

    async def remove_background(self, image: ImageBuffer) -> bytes:
        self.calls.append(image)
        if self.error:
            raise self.error
        return self.output


def _settings(**overrides) -> Settings:
    values = {"ark_api_key": "ark-key", "remove_bg_api_key": "rb-key"}
    values.update(overrides)
    return Settings(_env_file=None, **values)


def _png_bytes(size: Tuple[int, int] = (64, 48)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color=(10, 120, 200)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def fakes() -> VendorClients:
    return VendorClients(generator=FakeGenerator(), describer=FakeDescriber(), remover=FakeRemover())


@pytest.fixture
def client(fakes: VendorClients) -> TestClient:
    return TestClient(create_app(_settings(), fakes))


@pytest.fixture
def png_upload() -> dict:
    return {"image_file": ("photo.png", _png_bytes(), "image/png")}


# ============================================================================
# TESTS: /api/ai-generate
# ============================================================================

class TestAIGenerate:
    def test_success(self, client: TestClient, fakes: VendorClients):
        response = client.post("/api/ai-generate", json={"prompt": "a cat", "size": "1K"})

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "imageUrl": "https://cdn.example.com/out.png",
            "revisedPrompt": "a fluffy cat",
            "usage": {"generated_images": 1},
        }
        assert fakes.generator.calls == [("a cat", "1K")]

    def test_default_size(self, client: TestClient, fakes: VendorClients):
        client.post("/api/ai-generate", json={"prompt": "a cat"})
        assert fakes.generator.calls == [("a cat", "2K")]

    @pytest.mark.parametrize("prompt", ["", "   "])
    def test_empty_prompt(self, client: TestClient, fakes: VendorClients, prompt: str):
        response = client.post("/api/ai-generate", json={"prompt": prompt})
        assert response.status_code == 400
        assert "error" in response.json()
        assert fakes.generator.calls == []

    def test_missing_prompt(self, client: TestClient):
        response = client.post("/api/ai-generate", json={})
        assert response.status_code == 400

    def test_invalid_size(self, client: TestClient):
        response = client.post("/api/ai-generate", json={"prompt": "a cat", "size": "8K"})
        assert response.status_code == 400
        assert "size" in response.json()["error"]

    def test_missing_credential(self):
        """The real Ark client without a key yields a generic 500 error."""
        settings = _settings(ark_api_key=None)
        app = create_app(settings)
        assert isinstance(app.state.clients.generator, ArkClient)

        response = TestClient(app).post("/api/ai-generate", json={"prompt": "a cat"})

        assert response.status_code == 500
        assert response.json() == {"error": "API configuration error, please contact the administrator."}

    def test_empty_prompt_checked_before_credential(self):
        response = TestClient(create_app(_settings(ark_api_key=None))).post(
            "/api/ai-generate", json={"prompt": ""}
        )
        assert response.status_code == 400

    def test_upstream_error(self):
        fakes = VendorClients(
            generator=FakeGenerator(error=UpstreamError("Content blocked", status_code=422)),
            describer=FakeDescriber(),
            remover=FakeRemover(),
        )
        response = TestClient(create_app(_settings(), fakes)).post("/api/ai-generate", json={"prompt": "x"})
        assert response.status_code == 422
        assert response.json() == {"error": "Content blocked"}


# ============================================================================
# TESTS: /api/recognition
# ============================================================================

class TestRecognition:
    def test_success(self, client: TestClient, fakes: VendorClients, png_upload: dict):
        response = client.post("/api/recognition", files=png_upload, data={"prompt": "What is it?"})

        assert response.status_code == 200
        assert response.json() == {"success": True, "result": "A cat on a sofa.", "usage": {"total_tokens": 12}}
        image, prompt = fakes.describer.calls[0]
        assert prompt == "What is it?"
        assert image.mime_type == "image/png"
        assert image.format_tag == "png"
        assert image.filename == "photo.png"

    def test_prompt_omitted_passes_none(self, client: TestClient, fakes: VendorClients, png_upload: dict):
        """Without a prompt the describer receives None and applies its own default."""
        client.post("/api/recognition", files=png_upload)
        _, prompt = fakes.describer.calls[0]
        assert prompt is None

    def test_configured_default_prompt_reaches_vendor(self, png_upload: dict):
        """The default instruction comes from settings, applied once by the Ark client."""
        transport = RecordingTransport(
            lambda request: httpx.Response(200, json={"choices": [{"message": {"content": "ok"}}]})
        )
        settings = _settings(recognition_default_prompt="List the objects in this image.")
        app = create_app(settings, VendorClients.from_settings(settings, transport=transport))

        response = TestClient(app).post("/api/recognition", files=png_upload, data={"prompt": "  "})

        assert response.status_code == 200
        body = json.loads(transport.requests[0].content)
        assert body["messages"][0]["content"][0]["text"] == "List the objects in this image."

    def test_missing_image(self, client: TestClient, fakes: VendorClients):
        response = client.post("/api/recognition", data={"prompt": "What is it?"})
        assert response.status_code == 400
        assert "error" in response.json()
        assert fakes.describer.calls == []

    def test_empty_image(self, client: TestClient):
        response = client.post("/api/recognition", files={"image_file": ("empty.png", b"", "image/png")})
        assert response.status_code == 400

    def test_not_an_image(self, client: TestClient):
        response = client.post("/api/recognition", files={"image_file": ("notes.txt", b"hello", "text/plain")})
        assert response.status_code == 400
        assert response.json() == {"error": "Please select an image file."}

    def test_upstream_failure(self, png_upload: dict):
        fakes = VendorClients(
            generator=FakeGenerator(),
            describer=FakeDescriber(error=UpstreamError("Image recognition failed, please try again later.", 503)),
            remover=FakeRemover(),
        )
        response = TestClient(create_app(_settings(), fakes)).post("/api/recognition", files=png_upload)
        assert response.status_code == 503
        assert response.json() == {"error": "Image recognition failed, please try again later."}


# ============================================================================
# TESTS: /api/remove-bg
# ============================================================================

class TestRemoveBg:
    def test_binary_passthrough(self, client: TestClient, fakes: VendorClients, png_upload: dict):
        response = client.post("/api/remove-bg", files=png_upload)

        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"
        assert response.content == b"\x89PNG\r\n\x1a\nno-background"
        assert fakes.remover.calls[0].data == png_upload["image_file"][1]

    def test_missing_image(self, client: TestClient):
        response = client.post("/api/remove-bg")
        assert response.status_code == 400
        assert "error" in response.json()

    def test_upstream_status_propagated(self, png_upload: dict):
        fakes = VendorClients(
            generator=FakeGenerator(),
            describer=FakeDescriber(),
            remover=FakeRemover(error=UpstreamError("Insufficient credits", status_code=402)),
        )
        response = TestClient(create_app(_settings(), fakes)).post("/api/remove-bg", files=png_upload)
        assert response.status_code == 402
        assert response.headers["content-type"].startswith("application/json")
        assert response.json() == {"error": "Insufficient credits"}

    def test_missing_credential(self, png_upload: dict):
        app = create_app(_settings(remove_bg_api_key=None))
        assert isinstance(app.state.clients.remover, RemoveBgClient)
        response = TestClient(app).post("/api/remove-bg", files=png_upload)
        assert response.status_code == 500
        assert "error" in response.json()

    def test_upload_too_large(self, fakes: VendorClients):
        app = create_app(_settings(max_upload_bytes=1024), fakes)
        files = {"image_file": ("big.png", b"\x00" * 2048, "image/png")}
        response = TestClient(app).post("/api/remove-bg", files=files)
        assert response.status_code == 413
        assert fakes.remover.calls == []


# ============================================================================
# TESTS: /api/compress
# ============================================================================

class TestCompress:
    def test_success(self, client: TestClient, png_upload: dict):
        response = client.post("/api/compress", files=png_upload, data={"quality": "60"})

        assert response.status_code == 200
        assert response.headers["content-type"] == "image/jpeg"
        assert response.headers["x-image-width"] == "64"
        assert response.headers["x-image-height"] == "48"
        assert response.headers["x-quality"] == "60"
        assert response.headers["x-compressed-size"] == str(len(response.content))
        assert response.headers["x-original-size"] == str(len(png_upload["image_file"][1]))
        assert "compressed_" in response.headers["content-disposition"]

        decoded = Image.open(io.BytesIO(response.content))
        assert decoded.format == "JPEG"
        assert decoded.size == (64, 48)

    def test_default_quality(self, client: TestClient, png_upload: dict):
        response = client.post("/api/compress", files=png_upload)
        assert response.headers["x-quality"] == "80"

    @pytest.mark.parametrize("requested, effective", [("1", "10"), ("500", "100")])
    def test_quality_clamped(self, client: TestClient, png_upload: dict, requested: str, effective: str):
        response = client.post("/api/compress", files=png_upload, data={"quality": requested})
        assert response.status_code == 200
        assert response.headers["x-quality"] == effective

    def test_invalid_quality(self, client: TestClient, png_upload: dict):
        response = client.post("/api/compress", files=png_upload, data={"quality": "high"})
        assert response.status_code == 400

    def test_undecodable_image(self, client: TestClient):
        files = {"image_file": ("broken.png", b"not really a png", "image/png")}
        response = client.post("/api/compress", files=files)
        assert response.status_code == 400
        assert response.json()["error"].startswith("Unable to decode image")

    def test_missing_image(self, client: TestClient):
        response = client.post("/api/compress")
        assert response.status_code == 400


# ============================================================================
# TESTS: system routes + error shape
# ============================================================================

class TestSystem:
    def test_health(self, client: TestClient):
        response = client.get("/api/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["vendors"] == {"ark": True, "remove_bg": True}

    def test_health_reports_missing_credentials(self, fakes: VendorClients):
        app = create_app(_settings(ark_api_key=None, remove_bg_api_key=""), fakes)
        body = TestClient(app).get("/api/health").json()
        assert body["vendors"] == {"ark": False, "remove_bg": False}

    def test_root(self, client: TestClient):
        response = client.get("/api/")
        assert response.status_code == 200
        assert "version" in response.json()

    def test_unknown_route_uses_error_shape(self, client: TestClient):
        response = client.get("/api/does-not-exist")
        assert response.status_code == 404
        assert "error" in response.json()

    def test_unexpected_error_is_generic(self, png_upload: dict):
        fakes = VendorClients(
            generator=FakeGenerator(),
            describer=FakeDescriber(error=RuntimeError("boom")),
            remover=FakeRemover(),
        )
        test_client = TestClient(create_app(_settings(), fakes), raise_server_exceptions=False)
        response = test_client.post("/api/recognition", files=png_upload)
        assert response.status_code == 500
        assert response.json() == {"error": "Server error, please try again later."}
