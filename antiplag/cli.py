#!/usr/bin/env python3
"""
Plagiarism analysis CLI.
Usage:
  antiplag compare file1 file2 [--ngram-size N]
  antiplag scan file --storage DIR [--bucket NAME] [--key KEY] [--threshold T]
  antiplag serve [--host HOST] [--port PORT]
compare and scan output JSON to stdout.
"""

import argparse
import json
import logging
import os
import sys

from antiplag.config import settings
from antiplag.exceptions import PlagiarismServiceError
from antiplag.plagiarism.comparator import SimilarityConfig, TextComparator
from antiplag.plagiarism.analyzer import CorpusScanner
from antiplag.s3_storage import S3Storage
from antiplag.worker.worker import configure_logging


def _read(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()


def _fail(message: str) -> int:
    print(json.dumps({"error": message}))
    return 1


def cmd_compare(args) -> int:
    for path in (args.file1, args.file2):
        if not os.path.exists(path):
            return _fail(f"File not found: {path}")

    comparator = TextComparator(SimilarityConfig(ngram_size=args.ngram_size))
    similarity = comparator.compare(_read(args.file1), _read(args.file2))
    print(json.dumps({
        "file1": args.file1,
        "file2": args.file2,
        "similarity": similarity,
    }))
    return 0


def cmd_scan(args) -> int:
    if not os.path.exists(args.file):
        return _fail(f"File not found: {args.file}")

    config = SimilarityConfig(ngram_size=args.ngram_size, plagiarism_threshold=args.threshold)
    try:
        storage = S3Storage(base_path=args.storage, bucket_name=args.bucket)
        scanner = CorpusScanner(storage, TextComparator(config))
        max_score = scanner.scan(args.key or "", _read(args.file))
    except PlagiarismServiceError as e:
        return _fail(str(e))

    print(json.dumps({
        "file": args.file,
        "plagiarism_percentage": max_score,
        "is_plagiarism": max_score >= config.plagiarism_threshold,
    }))
    return 0


def cmd_serve(args) -> int:
    import uvicorn

    uvicorn.run("antiplag.app:app", host=args.host, port=args.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Plagiarism analysis CLI")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    compare_parser = subparsers.add_parser("compare", help="Score the overlap of two files")
    compare_parser.add_argument("file1", help="First file")
    compare_parser.add_argument("file2", help="Second file")
    compare_parser.add_argument("--ngram-size", type=int, default=settings.ngram_size)
    compare_parser.set_defaults(func=cmd_compare)

    scan_parser = subparsers.add_parser("scan", help="Score a file against a stored corpus")
    scan_parser.add_argument("file", help="File to check")
    scan_parser.add_argument("--storage", default=settings.storage_path, help="Storage base directory")
    scan_parser.add_argument("--bucket", default=settings.storage_bucket, help="Bucket name")
    scan_parser.add_argument("--key", default=None, help="Key of the file inside the bucket, excluded from the corpus")
    scan_parser.add_argument("--ngram-size", type=int, default=settings.ngram_size)
    scan_parser.add_argument("--threshold", type=float, default=settings.plagiarism_threshold)
    scan_parser.set_defaults(func=cmd_scan)

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default=settings.api_host)
    serve_parser.add_argument("--port", type=int, default=settings.api_port)
    serve_parser.set_defaults(func=cmd_serve)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(level=logging.DEBUG if args.verbose else logging.WARNING)
    try:
        return args.func(args)
    except ValueError as e:
        return _fail(str(e))


if __name__ == "__main__":
    sys.exit(main())
