"""
Output formatting for parsed conversations.

This module serialises Message lists and writes them to disk.
"""

import json
import logging
from pathlib import Path
from typing import List, Optional

from .models import Message


def messages_to_json(messages: List[Message], indent: Optional[int] = 2) -> str:
    """Serialise messages as a JSON array."""
    return json.dumps([m.to_dict() for m in messages], indent=indent, ensure_ascii=False)


def messages_to_jsonl(messages: List[Message]) -> str:
    """Serialise messages as JSON Lines, one message per line."""
    return ''.join(
        json.dumps(m.to_dict(), ensure_ascii=False) + '\n' for m in messages
    )


def format_messages(messages: List[Message], jsonl: bool = False) -> str:
    if jsonl:
        return messages_to_jsonl(messages)
    return messages_to_json(messages) + '\n'


def output_path_for(source: Path, output_dir: Path, jsonl: bool = False) -> Path:
    """Where the parsed form of `source` goes: <output_dir>/<stem>.json[l]."""
    suffix = '.jsonl' if jsonl else '.json'
    return output_dir / f"{source.stem}{suffix}"


def write_output(
    content: str,
    output_path: Path,
    dry_run: bool = False,
    logger: Optional[logging.Logger] = None
) -> Optional[Path]:
    """
    Write content to an output file.

    Args:
        content: Content to write
        output_path: Path to write to
        dry_run: If True, don't actually write
        logger: Optional logger for reporting

    Returns:
        Path to written file, or None if dry_run
    """
    if logger is None:
        logger = logging.getLogger(__name__)

    if dry_run:
        logger.info(f"  WOULD WRITE: {output_path} ({len(content)} bytes)")
        return None

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(content, encoding='utf-8')
    logger.info(f"  -> {output_path}")
    return output_path
