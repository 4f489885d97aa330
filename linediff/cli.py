"""
Command-line front end: compare two text files and print the result.

Exit status follows diff(1): 0 if the files are identical, 1 if they
differ, 2 on error.
"""
import argparse
import logging
import sys
from pathlib import Path

from linediff.config import DiffConfig, parse_limit
from linediff.engine import compute_diff
from linediff.formatters import export_diff_as_json, format_inline, format_summary, generate_unified_diff


logger = logging.getLogger(__name__)

FORMATS = ('unified', 'json', 'summary', 'inline')


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="linediff", description="Show line-level differences between two text files.")
    parser.add_argument("old_file", help="Original file")
    parser.add_argument("new_file", help="Changed file")
    parser.add_argument("-f", "--format", default="unified", choices=FORMATS, help="Output format (default: unified)")
    parser.add_argument("-U", "--unified", dest="context", type=int,
                        help="Number of context lines in unified output (default: 3, or LINEDIFF_CONTEXT_LINES)")
    parser.add_argument("--no-context", action="store_true",
                        help="Unified output with one hunk per changed block and no context lines")
    parser.add_argument("--threshold", type=float,
                        help="Similarity at which a removed/added pair counts as modified (default: 0.5)")
    parser.add_argument("--max-lines", type=parse_limit,
                        help="Refuse to compare documents with more lines in total (0 or 'none': no limit)")
    parser.add_argument("--max-edit-distance", type=parse_limit,
                        help="Give up once more than this many lines are removed or added (0 or 'none': no limit)")
    parser.add_argument("-o", "--output", help="Write the output to this file instead of stdout")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug logging")
    return parser


def read_text(path: Path) -> tuple[str | bytes, bool]:
    """Returns (content, is_binary). Binary content is returned undecoded."""
    data = path.read_bytes()
    try:
        return data.decode('utf-8'), False
    except UnicodeDecodeError:
        return data, True


def render(result, fmt: str, old_label: str, new_label: str, context_lines: int | None) -> str:
    if fmt == 'json':
        return export_diff_as_json(result)
    if fmt == 'summary':
        return format_summary(result)
    if fmt == 'inline':
        return format_inline(result)
    return generate_unified_diff(result, old_label, new_label, context_lines)


def main(argv: list[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if not logging.root.handlers:
        logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                            format='%(levelname)s: %(message)s')

    try:
        config = DiffConfig.from_env(
            similarity_threshold=args.threshold,
            max_lines=args.max_lines,
            max_edit_distance=args.max_edit_distance,
            context_lines=args.context,
        )

        old_path = Path(args.old_file)
        new_path = Path(args.new_file)
        content_a, is_bin_a = read_text(old_path)
        content_b, is_bin_b = read_text(new_path)

        if is_bin_a or is_bin_b:
            if content_a == content_b:
                return 0
            print(f"Binary files {args.old_file} and {args.new_file} differ")
            return 1

        result = compute_diff(content_a, content_b, config)
        context_lines = None if args.no_context else config.context_lines
        output = render(result, args.format, args.old_file, args.new_file, context_lines)

        if args.output:
            Path(args.output).write_text(output + '\n', encoding='utf-8')
            logger.debug(f"Wrote {args.format} output to {args.output}")
        else:
            print(output)
    except (OSError, ValueError) as e:
        print(f"linediff: error: {e}", file=sys.stderr)
        return 2

    return 1 if result.has_changes else 0


if __name__ == "__main__":
    sys.exit(main())
