"""Command-line interface for mind-note."""

import argparse
import logging
import sys

from mind_note import __version__
from mind_note.core import refine_sync
from mind_note.exceptions import AuthenticationError, MindNoteError
from mind_note.schema import MemoRefinement


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="mind-note",
        description="Refine a raw memo into a structured note",
    )
    parser.add_argument("text", help="Memo text, or '-' to read from stdin")
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )
    parser.add_argument(
        "--provider",
        help="Generation provider: gemini or groq (default: MIND_NOTE_PROVIDER env var, then gemini)",
    )
    parser.add_argument(
        "--api-key",
        help="Provider API key (default: GEMINI_API_KEY / GROQ_API_KEY env var)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log pipeline progress to stderr",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"mind-note {__version__}",
    )

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    text = sys.stdin.read() if args.text == "-" else args.text

    try:
        result = refine_sync(text, api_key=args.api_key, provider=args.provider)
    except AuthenticationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except MindNoteError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if args.json:
        print(result.model_dump_json(indent=2))
    else:
        _print_formatted(result)

    return 0


def _print_formatted(result: MemoRefinement) -> None:
    """Print result in human-readable format."""
    print()
    print("  mind-note" + ("  (fallback)" if result.is_fallback else ""))
    print()

    fields = [
        ("Refined", result.refined),
        ("Tag", result.tag),
        ("Context", result.context),
        ("Insight", result.insight),
        ("Language", result.language),
    ]

    for label, value in fields:
        display = value if value else "-"
        print(f"  {label + ':':<10} {display}")

    print()


if __name__ == "__main__":
    sys.exit(main())
