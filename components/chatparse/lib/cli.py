#!/usr/bin/env python3
"""
chatparse CLI - Turn pasted chat transcripts into structured messages.

Usage:
    python -m components.chatparse.lib.cli parse <files>... [-o OUTPUT] [--format F] [--jsonl]
    python -m components.chatparse.lib.cli score <file>
    python -m components.chatparse.lib.cli check-date <text>...
    python -m components.chatparse.lib.cli --help

Commands:
    parse       Parse pasted conversations to JSON ('-' reads stdin)
    score       Debug: show per-line classification scores
    check-date  Debug: show how date/timestamp strings resolve
"""

import argparse
import sys
import logging
from pathlib import Path

from .config import ConfigError, FORMAT_AUTO, load_config, validate_format_hint
from .models import FORMAT_HINTS


def _read_source(file_path: str) -> str:
    if file_path == '-':
        return sys.stdin.read()
    return Path(file_path).read_text(encoding='utf-8')


def cmd_parse(args):
    """Parse pasted conversation files to JSON."""
    from .output import format_messages, output_path_for, write_output
    from .parser import detect_format, parse_conversation

    try:
        config = load_config(Path(args.config) if args.config else None)
        if args.format:
            config.format_hint = validate_format_hint(args.format)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.no_dedup:
        config.deduplicate = False
    if args.verbose:
        config.debug = True

    output_dir = Path(args.output) if args.output else None
    failures = 0

    for file_path in args.files:
        if file_path != '-' and not Path(file_path).exists():
            print(f"Warning: {file_path} not found, skipping", file=sys.stderr)
            failures += 1
            continue

        print(f"Parsing: {file_path}", file=sys.stderr)
        try:
            text = _read_source(file_path)
            hint = detect_format(text) if config.format_hint == FORMAT_AUTO else None
            messages = parse_conversation(text, config.to_options(format_hint=hint))
            content = format_messages(messages, jsonl=args.jsonl)

            if output_dir and file_path != '-':
                out_path = output_path_for(Path(file_path), output_dir, jsonl=args.jsonl)
                write_output(content, out_path)
                print(f"  -> {out_path} ({len(messages)} messages)", file=sys.stderr)
            else:
                sys.stdout.write(content)

        except (OSError, UnicodeDecodeError) as e:
            print(f"  Error: {e}", file=sys.stderr)
            failures += 1
            if args.verbose:
                import traceback
                traceback.print_exc()

    if failures:
        sys.exit(1)


def cmd_score(args):
    """Debug: print the classification of every line in a file."""
    from .classifier import score_line
    from .models import ParserContext

    path = Path(args.file)
    if not path.exists():
        print(f"Error: {args.file} not found")
        sys.exit(1)

    context = ParserContext(lines=path.read_text(encoding='utf-8').split('\n'))
    print(f"{'#':>4}  {'user':>4} {'time':>4} {'both':>4} {'date':>4} {'meta':>4} {'conf':>4}  line")
    for index in range(len(context.lines)):
        line = context.line_at(index)
        score = score_line(line.trimmed, context)
        print(
            f"{line.index:>4}  {score.is_username:4.2f} {score.is_timestamp:4.2f} "
            f"{score.has_user_and_time:4.2f} {score.is_date_separator:4.2f} "
            f"{score.is_metadata:4.2f} {score.confidence:4.2f}  {line.trimmed[:60]}"
        )


def cmd_check_date(args):
    """Debug: show parse_date / normalize_timestamp results."""
    from .timestamps import normalize_timestamp, parse_date

    for text in args.texts:
        day = parse_date(text)
        resolved = normalize_timestamp(text)
        print(text)
        print(f"  parse_date:          {day.isoformat() if day else None}")
        print(f"  normalize_timestamp: {resolved.isoformat() if resolved else None}")


def main():
    parser = argparse.ArgumentParser(
        description="chatparse - Structure pasted chat transcripts"
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Show detailed output'
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # parse command
    parse_parser = subparsers.add_parser(
        'parse',
        help="Parse pasted conversations to JSON ('-' reads stdin)"
    )
    parse_parser.add_argument(
        'files',
        nargs='+',
        help='Paste files to parse'
    )
    parse_parser.add_argument(
        '--output', '-o',
        help='Output directory (default: stdout)'
    )
    parse_parser.add_argument(
        '--format', '-f',
        choices=list(FORMAT_HINTS) + [FORMAT_AUTO],
        help='Layout hint (default: from config, else format-agnostic)'
    )
    parse_parser.add_argument(
        '--jsonl',
        action='store_true',
        help='Write JSON Lines instead of a JSON array'
    )
    parse_parser.add_argument(
        '--config', '-c',
        help='Path to config YAML (default: $CHATPARSE_CONFIG)'
    )
    parse_parser.add_argument(
        '--no-dedup',
        action='store_true',
        help='Keep duplicate messages'
    )
    parse_parser.set_defaults(func=cmd_parse)

    # score command (debug)
    score_parser = subparsers.add_parser(
        'score',
        help='Debug: show per-line classification scores'
    )
    score_parser.add_argument(
        'file',
        help='File to score'
    )
    score_parser.set_defaults(func=cmd_score)

    # check-date command (debug)
    check_date_parser = subparsers.add_parser(
        'check-date',
        help='Debug: show how date/timestamp strings resolve'
    )
    check_date_parser.add_argument(
        'texts',
        nargs='+',
        help='Date or timestamp strings'
    )
    check_date_parser.set_defaults(func=cmd_check_date)

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    args.func(args)


if __name__ == '__main__':
    main()
