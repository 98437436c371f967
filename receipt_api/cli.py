"""
Command-line driver: run the receipt extractor on a local image file.

Prints the expense report and saves it to a JSON file.
"""

import argparse
import asyncio
import json
import mimetypes
import sys
from pathlib import Path

from pydantic import ValidationError

from receipt_api.config import Settings
from receipt_api.logging_config import setup_logging
from receipt_api.receipt.base import ExpenseReport
from receipt_api.receipt.factory import build_receipt_extractor

DEFAULT_IMAGE = "./receipt1.jpg"
DEFAULT_OUTPUT = "./expense-report.json"


def guess_content_type(path: Path) -> str:
    content_type, _ = mimetypes.guess_type(path.name)
    if content_type and content_type.startswith("image/"):
        return content_type
    return "image/jpeg"


def log_summary(logger, data: dict) -> None:
    try:
        report = ExpenseReport.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Report does not match the expense report layout: {e.error_count()} issue(s)")
        return

    merchant = report.receipt_info.merchant_name if report.receipt_info else None
    total = report.totals.total if report.totals else None
    currency = report.totals.currency if report.totals else None
    logger.info(
        f"Merchant: {merchant or 'unknown'}, total: {total if total is not None else 'unknown'} {currency or ''}".rstrip()
    )


def process_file(image_path: Path, output_path: Path, settings: Settings) -> dict:
    extractor = build_receipt_extractor(settings)
    image_bytes = image_path.read_bytes()
    data = asyncio.run(extractor.extract(image_bytes, guess_content_type(image_path)))

    output_path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    return data


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Extract an expense report from a receipt image",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  receipt-extract
  receipt-extract lunch.png --output lunch.json

Environment Variables:
  RECEIPT_PROVIDER - gemini (default) or openai
  GOOGLE_API_KEY / OPENAI_API_KEY - credential for the selected provider
        """,
    )
    parser.add_argument("image", nargs="?", default=DEFAULT_IMAGE, help=f"Receipt image (default: {DEFAULT_IMAGE})")
    parser.add_argument("--output", default=DEFAULT_OUTPUT, help=f"Output JSON path (default: {DEFAULT_OUTPUT})")
    args = parser.parse_args(argv)

    logger = setup_logging()
    image_path = Path(args.image)
    output_path = Path(args.output)

    try:
        logger.info(f"Processing receipt: {image_path}")
        data = process_file(image_path, output_path, Settings.from_env())
    except Exception as e:
        logger.error(f"Failed to process receipt: {e}", exc_info=True)
        return 1

    print("\n=== EXPENSE REPORT JSON ===")
    print(json.dumps(data, indent=2, ensure_ascii=False))
    log_summary(logger, data)
    logger.info(f"Expense report saved to: {output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
