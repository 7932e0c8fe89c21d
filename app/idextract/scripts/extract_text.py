from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from idextract.pipeline.errors import ExtractionError
from idextract.pipeline.extract import extract_document_fields, failure_payload
from idextract.pipeline.ocr import load_image, ocr_image_text
from idextract.pipeline.tables import DEFAULT_TABLES, KENYAN_PASSPORT_TABLES
from idextract.pipeline.trace import ExtractionTrace
from idextract.schemas import DocumentType

TEXT_SUFFIXES = {".txt", ".text"}


def read_document_text(path: Path) -> str:
    if path.suffix.lower() in TEXT_SUFFIXES:
        return path.read_text()
    return ocr_image_text(load_image(path.read_bytes()))


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Extract identity fields from an OCR text dump or a document image.")
    parser.add_argument("path", type=Path, help="Path to a .txt OCR dump or a document image")
    parser.add_argument(
        "--document-type",
        choices=[item.value for item in DocumentType],
        default=DocumentType.PASSPORT.value,
    )
    parser.add_argument("--trace", action="store_true", help="Include the extraction trace in the output")
    parser.add_argument(
        "--kenyan-passport",
        action="store_true",
        help="Use the Kenyan passport tables (bare KEN counts as the country)",
    )
    args = parser.parse_args(argv)

    raw_text = read_document_text(args.path)
    trace = ExtractionTrace(enabled=args.trace)
    tables = KENYAN_PASSPORT_TABLES if args.kenyan_passport else DEFAULT_TABLES
    try:
        result = extract_document_fields(raw_text, args.document_type, tables=tables, trace=trace)
    except ExtractionError as exc:
        payload = {"error": failure_payload(exc).model_dump(mode="json")}
        if args.trace:
            payload["trace"] = trace.to_list()
        print(json.dumps(payload, indent=2))
        print(exc.message, file=sys.stderr)
        return 1

    payload = {"result": result.model_dump(mode="json", exclude={"raw_text"})}
    if args.trace:
        payload["trace"] = trace.to_list()
    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
