"""
Config Reader - loads the target list file into numbered raw records.

File format, one target per line:

    # name, local mount point, host, port
    nas-media,/mnt/media,192.168.1.10,2049

Blank lines and lines starting with '#' are kept as records so that line
numbers in validation errors match the file; the validator skips them.
"""

import logging
from pathlib import Path
from typing import List, Union

import aiofiles

from ..core.exceptions import ConfigUnavailableError
from ..models import RawRecord

FIELD_SEPARATOR = ","


def parse_records(content: str) -> List[RawRecord]:
    """Split config file content into one RawRecord per physical line."""
    records = []
    lines = content.split("\n")
    if lines and lines[-1] == "":
        lines.pop()

    # Only \n ends a line; form feeds and other separators stay inside it
    for line_number, line in enumerate(lines, start=1):
        text = line.rstrip("\r").strip()
        fields = [part.strip() for part in text.split(FIELD_SEPARATOR)] if text else []
        records.append(RawRecord(line_number=line_number, text=text, fields=fields))
    return records


async def read_records(path: Union[str, Path]) -> List[RawRecord]:
    """Read and split the config file. Raises ConfigUnavailableError if unreadable."""
    try:
        async with aiofiles.open(path, "r", encoding="utf-8", newline="") as f:
            content = await f.read()
    except (OSError, UnicodeDecodeError) as e:
        logging.error(f"Could not read config file {path}: {e}")
        raise ConfigUnavailableError(str(path), str(e)) from e

    records = parse_records(content)
    logging.debug(f"Read {len(records)} line(s) from config file {path}")
    return records
