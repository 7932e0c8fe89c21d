from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Tuple


def _load_dotenv() -> None:
    repo_root = Path(__file__).resolve().parents[2]
    candidates = [repo_root / ".env", Path.cwd() / ".env"]
    for env_path in candidates:
        if not env_path.exists():
            continue
        try:
            for line in env_path.read_text().splitlines():
                stripped = line.strip()
                if not stripped or stripped.startswith("#") or "=" not in stripped:
                    continue
                key, value = stripped.split("=", 1)
                key = key.strip()
                value = value.strip().strip('"').strip("'")
                if key and key not in os.environ:
                    os.environ[key] = value
        except OSError:
            continue
        break


_load_dotenv()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


def _env_codes(name: str) -> Tuple[str, ...]:
    raw = os.getenv(name, "")
    return tuple(code.strip().upper() for code in raw.split(",") if code.strip())


@dataclass(frozen=True)
class OCRConfig:
    lang: str = os.getenv("IDEXTRACT_OCR_LANG", "eng")
    # 3 = fully automatic page segmentation.
    psm: int = int(os.getenv("IDEXTRACT_OCR_PSM", "3"))
    char_whitelist: str = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789/-.:"


@dataclass(frozen=True)
class ExtractionConfig:
    trace: bool = _env_flag("IDEXTRACT_TRACE")
    keyword_window_before: int = 75
    keyword_window_after: int = 150
    # Empty keeps the bare-code country fallback disabled.
    country_fallback_codes: Tuple[str, ...] = _env_codes("IDEXTRACT_COUNTRY_FALLBACK")


@dataclass(frozen=True)
class AppConfig:
    log_level: str = os.getenv("IDEXTRACT_LOG_LEVEL", "INFO").upper()
    ocr: OCRConfig = field(default_factory=OCRConfig)
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)


CONFIG = AppConfig()
