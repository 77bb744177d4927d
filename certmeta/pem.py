"""PEM block scanning.

Finds BEGIN/END delimited blocks in arbitrary bytes, one at a time, skipping
anything that is not a well-formed block. Every call consumes at least one
byte of input when it returns a block, and a failed candidate is skipped by
resuming after its BEGIN line, so scans over corrupted files always end.
"""

import base64
import binascii
import logging
import re
from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional, Tuple

logger = logging.getLogger(__name__)

# BEGIN line, at the start of the buffer or of a line
BEGIN_RE = re.compile(rb"^-----BEGIN ([^\r\n]*?)-----[ \t]*\r?$", re.MULTILINE)

LINE_WIDTH = 64


@dataclass
class PemBlock:
    """A decoded PEM block."""
    type:       str
    data:       bytes
    headers:    Dict[str, str] = field(default_factory=dict)


def _split_headers(body: bytes) -> Tuple[Dict[str, str], bytes]:
    """Pull RFC 1421 style headers (``Proc-Type: ...``) off the front of a body."""
    lines = body.splitlines()
    if not lines or b":" not in lines[0]:
        return {}, body

    headers = {}
    for idx, line in enumerate(lines):
        if not line.strip():
            return headers, b"\n".join(lines[idx + 1:])
        key, sep, value = line.partition(b":")
        if not sep:
            # header section must end with a blank line
            break
        headers[key.strip().decode("ascii", "replace")] = value.strip().decode("ascii", "replace")

    return {}, body


def _end_of_line(data: bytes, pos: int) -> int:
    """Index just past the newline that ends the line containing ``pos``."""
    nl = data.find(b"\n", pos)
    return len(data) if nl == -1 else nl + 1


def decode(data: bytes) -> Tuple[Optional[PemBlock], bytes]:
    """Decode the first well-formed PEM block in ``data``.

    Args:
        data: Raw bytes, possibly with junk before, between or after blocks

    Returns:
        (block, rest) where rest is everything after the block's END line, or
        (None, data) if no block could be decoded
    """
    pos = 0
    while True:
        begin = BEGIN_RE.search(data, pos)
        if begin is None:
            return None, data

        label = begin.group(1)
        body_start = _end_of_line(data, begin.end())
        resume = body_start

        # END line, also only at the start of a line
        end = re.compile(rb"^-----END " + re.escape(label) + rb"-----", re.MULTILINE).search(data, body_start)
        if end is None:
            logger.debug(f"PEM block '{label.decode('ascii', 'replace')}' has no END line, skipping")
            pos = resume
            continue

        headers, body = _split_headers(data[body_start:end.start()])
        try:
            payload = base64.b64decode(b"".join(body.split()), validate=True)
        except (binascii.Error, ValueError) as e:
            logger.debug(f"PEM block '{label.decode('ascii', 'replace')}' has invalid base64: {e}")
            pos = resume
            continue

        rest = data[_end_of_line(data, end.end()):]
        block = PemBlock(type=label.decode("ascii", "replace"), data=payload, headers=headers)
        return block, rest


def iter_blocks(data: bytes) -> Iterator[PemBlock]:
    """Yield every decodable PEM block in order."""
    rest = data
    while rest:
        block, rest = decode(rest)
        if block is None:
            return
        yield block


def encode(label: str, payload: bytes) -> bytes:
    """Armor ``payload`` as a PEM block with the given label."""
    b64 = base64.b64encode(payload)
    lines = [b64[i:i + LINE_WIDTH] for i in range(0, len(b64), LINE_WIDTH)]
    head = f"-----BEGIN {label}-----\n".encode("ascii")
    tail = f"-----END {label}-----\n".encode("ascii")
    return head + b"".join(line + b"\n" for line in lines) + tail
