#
# certmeta command line: analyze certificate and key files, print JSON or
# a short text summary
#

import argparse
import fileinput
import json
import logging
import os
import sys
from typing import Any, Dict, List, Optional, Tuple

from .bundle import analyze_directory
from .certificate import analyze_certificate
from .key import analyze_key
from .settings import MAX_FILE_SIZE, Settings

logger = logging.getLogger("certmeta")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments.

    Returns: Parsed arguments

    """
    parser = argparse.ArgumentParser(
        prog="certmeta",
        description="Extract metadata from PEM certificates and private keys"
    )
    parser.add_argument(
        "-c",
        "--cert",
        action="append",
        default=[],
        metavar="CERT_FILE",
        help="Analyze a file as a certificate (repeatable)"
    )
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Enable debug output"
    )
    parser.add_argument(
        "--dir",
        metavar="DIRECTORY",
        help="Analyze privkey.pem, cert.pem, chain.pem and fullchain.pem in a directory"
    )
    parser.add_argument(
        "files",
        metavar="FILES",
        nargs="*",
        help="Files to analyze; names containing 'key' are treated as keys. '-' reads names from stdin"
    )
    parser.add_argument(
        "-k",
        "--key",
        action="append",
        default=[],
        metavar="KEY_FILE",
        help="Analyze a file as a private key (repeatable)"
    )
    parser.add_argument(
        "--max_file_size",
        "-m",
        type=int,
        default=MAX_FILE_SIZE,
        help="Maximum size in bytes of a file to analyze"
    )
    parser.add_argument(
        "-o",
        "--output",
        choices=["json", "text"],
        default="json",
        help="Output format (default: json)"
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output"
    )

    args = parser.parse_args(argv)
    if not (args.files or args.cert or args.key or args.dir):
        parser.error("no files specified")
    if args.max_file_size <= 0:
        parser.error("--max_file_size must be positive")
    return args


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(format=LOG_FORMAT, level=logging.WARNING)

    if settings.debug:
        logger.setLevel(logging.DEBUG)
    elif settings.verbose:
        logger.setLevel(logging.INFO)
    else:
        logger.setLevel(logging.WARNING)


def is_key_file(filename: str) -> bool:
    """Guess from the name whether a file holds a private key."""
    return "key" in os.path.basename(filename).lower()


def expand_files(files: List[str]) -> List[str]:
    """Replace '-' with file names read from stdin, one per line."""
    expanded = []
    for filename in files:
        if filename != "-":
            expanded.append(filename)
            continue
        for line in fileinput.input(files=("-",)):
            # names could have spaces, only drop the newline
            line = line.rstrip("\r\n")
            if line:
                expanded.append(line)
    return expanded


def collect(args: argparse.Namespace, settings: Settings) -> Tuple[Dict[str, Any], bool]:
    """Run every requested analysis.

    Returns:
        (result, ok) where ok is False if any record carries an error
    """
    cert_files = list(args.cert)
    key_files = list(args.key)
    for filename in expand_files(args.files):
        if is_key_file(filename):
            key_files.append(filename)
        else:
            cert_files.append(filename)

    result: Dict[str, Any] = {}
    ok = True

    certificates = []
    for filename in cert_files:
        logger.info(f"Processing certificate {filename}")
        record = analyze_certificate(filename, settings.max_file_size)
        ok = ok and record.ok
        certificates.append(record.to_dict())
    if certificates:
        result["certificates"] = certificates

    keys = []
    for filename in key_files:
        logger.info(f"Processing key {filename}")
        record = analyze_key(filename, settings.max_file_size)
        ok = ok and record.ok
        keys.append(record.to_dict())
    if keys:
        result["keys"] = keys

    if args.dir:
        logger.info(f"Processing directory {args.dir}")
        report = analyze_directory(args.dir, settings)
        ok = ok and report.ok
        result["bundle"] = report.to_dict()

    return result, ok


def _summarize_record(entry: Dict[str, Any]) -> List[str]:
    lines = [f"{entry['file']}:"]
    if "error" in entry:
        lines.append(f"  Error: {entry['error']}")
    elif "type" in entry:
        lines.append(f"  Key: {entry['type']} ({entry['size']})")
    else:
        lines.append(f"  Subject: {entry['subject']}")
        lines.append(f"  Issuer: {entry['issuer']}")
        lines.append(f"  Valid: {entry['not_before']} - {entry['not_after']}")
        if entry.get("dns_names"):
            lines.append(f"  DNS Names: {', '.join(entry['dns_names'])}")
    return lines


def text_summary(result: Dict[str, Any]) -> str:
    """Human readable rendering of a ``collect`` result."""
    lines = []
    for section in ("certificates", "keys"):
        for entry in result.get(section, []):
            lines.extend(_summarize_record(entry))

    bundle = result.get("bundle")
    if bundle is not None:
        if "error" in bundle:
            lines.append(f"Bundle error: {bundle['error']}")
        for name, entry in bundle.items():
            if name == "error":
                continue
            lines.append(f"[{name}]")
            lines.extend(_summarize_record(entry))

    return "\n".join(lines)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    settings = Settings(
        max_file_size   = args.max_file_size,
        verbose         = args.verbose,
        debug           = args.debug,
        output_format   = args.output
    )
    configure_logging(settings)

    result, ok = collect(args, settings)

    if settings.output_format == "json":
        print(json.dumps(result, indent=2, default=str))
    else:
        print(text_summary(result))

    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
