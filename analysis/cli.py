"""
Command line entry point.

Usage:
    python -m analysis.cli analyze docs/pms-api.pdf
    python -m analysis.cli scan docs/pms-api.txt
    python -m analysis.cli serve --port 8000
"""

import argparse
import json
import logging
import sys
from pathlib import Path

import uvicorn
from dotenv import load_dotenv

from chunking import normalize_text
from credentials import CredentialScanner, summarize
from pdf_extractor import PdfTextExtractor

from .app import create_app
from .logging_config import setup_logging
from .service import AnalysisService

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Analyze PMS API documentation PDFs",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze = subparsers.add_parser("analyze", help="Run a full analysis and print the result JSON")
    analyze.add_argument("pdf_path", help="Path to the documentation PDF")
    analyze.add_argument("--prompt-version", default=None, help="Prompt version (default from config)")
    analyze.add_argument("--model", default=None, help="Model name (default from config)")
    analyze.add_argument("--pdf-report", default=None, help="Also write the PDF report to this path")

    scan = subparsers.add_parser("scan", help="Scan a PDF or text file for credentials")
    scan.add_argument("path", help="Path to a .pdf or .txt file")

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="0.0.0.0", help="Server host")
    serve.add_argument("--port", type=int, default=8000, help="Server port")

    return parser


def run_analyze(args: argparse.Namespace) -> int:
    service = AnalysisService()
    analysis = service.analyze_file(args.pdf_path, args.prompt_version, args.model)

    print(json.dumps(service.download_payload(analysis), ensure_ascii=False, indent=2))

    if args.pdf_report:
        Path(args.pdf_report).write_bytes(service.render_pdf(analysis))
        logger.info(f"Report written to {args.pdf_report}")
    return 0


def run_scan(args: argparse.Namespace) -> int:
    path = Path(args.path)
    if path.suffix.lower() == ".pdf":
        text = PdfTextExtractor().extract_file(path)
    else:
        text = path.read_text(encoding="utf-8", errors="replace")

    matches = CredentialScanner().scan(normalize_text(text))
    print(json.dumps(
        {
            "credential_types": summarize(matches),
            "matches": [match.model_dump(mode="json") for match in matches],
        },
        ensure_ascii=False,
        indent=2,
    ))
    return 0


def run_server(args: argparse.Namespace) -> int:
    uvicorn.run(create_app(), host=args.host, port=args.port)
    return 0


def main(argv=None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else None)

    try:
        if args.command == "analyze":
            return run_analyze(args)
        if args.command == "serve":
            return run_server(args)
        return run_scan(args)
    except Exception as exc:
        logger.error(f"{args.command} failed: {exc}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
