"""Escape/unescape CLI commands."""

import argparse
import sys
from pathlib import Path

from common_middleware.escape import escape, unescape


def _read(path: str) -> str | None:
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return None
    except UnicodeDecodeError as e:
        print(f"ERROR: {path}: not valid UTF-8: {e}", file=sys.stderr)
        return None


def cmd_escape(args: argparse.Namespace) -> int:
    text = _read(args.file)
    if text is None:
        return 1
    sys.stdout.write(escape(text))
    return 0


def cmd_unescape(args: argparse.Namespace) -> int:
    text = _read(args.file)
    if text is None:
        return 1
    sys.stdout.write(unescape(text, strip=args.strip))
    return 0
