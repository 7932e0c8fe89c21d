from __future__ import annotations

import io
import logging
from typing import Optional

import pytesseract
from PIL import Image

from ..config import CONFIG
from .errors import OCRError

LOGGER = logging.getLogger(__name__)


def _tesseract_config() -> str:
    return f"--psm {CONFIG.ocr.psm} -c tessedit_char_whitelist={CONFIG.ocr.char_whitelist}"


def load_image(data: bytes) -> Image.Image:
    """Decode uploaded bytes; raises PIL.UnidentifiedImageError on junk."""
    image = Image.open(io.BytesIO(data))
    if image.mode not in {"RGB", "L"}:
        image = image.convert("RGB")
    return image


def ocr_image_text(image: Image.Image, lang: Optional[str] = None) -> str:
    """Run OCR on one document image and return its best-effort text blob."""
    lang = lang or CONFIG.ocr.lang
    config = _tesseract_config()
    try:
        text = pytesseract.image_to_string(image, lang=lang, config=config)
    except pytesseract.TesseractError as exc:
        if not lang:
            raise OCRError(str(exc)) from exc
        LOGGER.warning("OCR language %s failed; retrying default OCR.", lang)
        try:
            text = pytesseract.image_to_string(image, config=config)
        except pytesseract.TesseractError as retry_exc:
            raise OCRError(str(retry_exc)) from retry_exc
    except pytesseract.TesseractNotFoundError as exc:
        raise OCRError("tesseract is not installed or not on PATH") from exc
    LOGGER.debug("OCR extracted %d characters", len(text))
    return text
