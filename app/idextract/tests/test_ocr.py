from __future__ import annotations

import io

import pytest
import pytesseract
from PIL import Image, UnidentifiedImageError

from idextract.pipeline import ocr
from idextract.pipeline.errors import OCRError


@pytest.fixture
def image() -> Image.Image:
    return Image.new("RGB", (40, 20), color="white")


def test_load_image_converts_to_rgb() -> None:
    buffer = io.BytesIO()
    Image.new("RGBA", (10, 10)).save(buffer, format="PNG")
    assert ocr.load_image(buffer.getvalue()).mode == "RGB"


def test_load_image_rejects_junk() -> None:
    with pytest.raises(UnidentifiedImageError):
        ocr.load_image(b"junk")


def test_ocr_passes_language_and_whitelist(monkeypatch: pytest.MonkeyPatch, image: Image.Image) -> None:
    calls = []

    def fake(img, lang=None, config=""):
        calls.append((lang, config))
        return "PASSPORT NO AK1626595"

    monkeypatch.setattr(pytesseract, "image_to_string", fake)
    assert ocr.ocr_image_text(image, lang="eng") == "PASSPORT NO AK1626595"
    lang, config = calls[0]
    assert lang == "eng"
    assert "--psm" in config
    assert "tessedit_char_whitelist=" in config


def test_ocr_retries_without_language(monkeypatch: pytest.MonkeyPatch, image: Image.Image) -> None:
    calls = []

    def fake(img, lang=None, config=""):
        calls.append(lang)
        if lang:
            raise pytesseract.TesseractError(1, "missing traineddata")
        return "TEXT"

    monkeypatch.setattr(pytesseract, "image_to_string", fake)
    assert ocr.ocr_image_text(image, lang="swa") == "TEXT"
    assert calls == ["swa", None]


def test_ocr_failure_is_wrapped(monkeypatch: pytest.MonkeyPatch, image: Image.Image) -> None:
    def fake(img, lang=None, config=""):
        raise pytesseract.TesseractNotFoundError()

    monkeypatch.setattr(pytesseract, "image_to_string", fake)
    with pytest.raises(OCRError):
        ocr.ocr_image_text(image)
