"""adt-decode command line tool."""
import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable, List, Optional

from .chunks.flags import EdgeFixPolicy, FileFlags
from .errors import ChunkParsingError
from .export import save_alpha_pngs, save_json
from .files.adt import AdtFile
from .files.wdt import WdtFile
from .utils.logging import setup_logging

logger = logging.getLogger(__name__)


def collect_inputs(paths: Iterable[Path]) -> List[Path]:
    """Expand directories to the ADT and WDT files they contain."""
    files = []
    for path in paths:
        if path.is_dir():
            files.extend(sorted(path.glob('*.wdt')))
            files.extend(sorted(path.glob('*.adt')))
        else:
            files.append(path)
    return files


def resolve_file_flags(args: argparse.Namespace) -> FileFlags:
    if args.wdt:
        wdt = WdtFile.from_file(args.wdt, strict=args.strict)
        logger.info(f"Alpha format from {args.wdt}: "
                    f"{'8-bit' if wdt.file_flags.wide_alpha else '4-bit'}")
        return wdt.file_flags
    if args.wide_alpha:
        return FileFlags(wide_alpha=True)
    return FileFlags()


def process_file(path: Path, args: argparse.Namespace, file_flags: FileFlags) -> int:
    """Decode one file and write its outputs. Returns the number of issues."""
    output_dir = Path(args.output)
    edge_policy = EdgeFixPolicy(args.edge_policy)

    if path.suffix.lower() == '.wdt':
        wdt = WdtFile.from_file(path, strict=args.strict)
        save_json(wdt, output_dir)
        return len(wdt.errors)

    adt = AdtFile.from_file(path, file_flags, edge_policy,
                            strict=args.strict, workers=args.workers)
    save_json(adt, output_dir, include_alpha=args.include_alpha)
    if args.export_alpha:
        save_alpha_pngs(adt, output_dir / 'alpha')
    for issue in adt.errors:
        logger.debug(f"{path.name}: {issue.tag} at {issue.offset}: {issue.error}")
    return len(adt.errors)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description='Decode ADT/WDT terrain files into JSON and alpha mask images'
    )
    parser.add_argument('inputs', nargs='+',
                        help='ADT/WDT files or directories containing them')
    parser.add_argument('--wdt',
                        help='WDT file that declares the alpha format of the ADTs')
    parser.add_argument('--wide-alpha', action='store_true',
                        help='Treat alpha maps as 8-bit when no WDT is given')
    parser.add_argument('--edge-policy',
                        choices=[policy.value for policy in EdgeFixPolicy],
                        default=EdgeFixPolicy.TILE_FLAG.value,
                        help='Which alpha masks get the last row/column fix')
    parser.add_argument('--workers', type=int, default=1,
                        help='Threads used to decode tiles')
    parser.add_argument('--output',
                        default='output',
                        help='Output directory')
    parser.add_argument('--export-alpha', action='store_true',
                        help='Write one PNG per alpha mask')
    parser.add_argument('--include-alpha', action='store_true',
                        help='Include alpha mask values in the JSON output')
    parser.add_argument('--strict', action='store_true',
                        help='Stop at the first decode error')
    parser.add_argument('--log-dir',
                        default='logs',
                        help='Log directory')
    parser.add_argument('--verbose', '-v',
                        action='store_true',
                        help='Enable verbose logging')

    args = parser.parse_args(argv)

    log_level = logging.DEBUG if args.verbose else logging.INFO
    setup_logging(args.log_dir, log_level)

    if args.workers < 1:
        logger.error(f"--workers must be at least 1, got {args.workers}")
        return 1

    files = collect_inputs(Path(p) for p in args.inputs)
    missing = [path for path in files if not path.is_file()]
    if missing:
        for path in missing:
            logger.error(f"File not found: {path}")
        return 1
    if not files:
        logger.error("No ADT or WDT files found")
        return 1

    try:
        file_flags = resolve_file_flags(args)
        total_issues = 0
        for path in files:
            total_issues += process_file(path, args, file_flags)
    except (ChunkParsingError, OSError) as e:
        logger.error(f"Processing failed: {e}")
        return 1

    logger.info(f"Processing complete: {len(files)} files, {total_issues} issues")
    return 0


if __name__ == "__main__":
    sys.exit(main())
