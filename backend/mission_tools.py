#!/usr/bin/env python3
"""
Offline helpers for mission data folders.

Usage:
    python mission_tools.py index <data_folder> [--output missions.json]
    python mission_tools.py reduce <src.csv> <dst.csv> [--every 10]
    python mission_tools.py sample <output_folder>
"""

import argparse
import logging
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent))

from auvmission.services.repository import MissionRepository
from auvmission.services.telemetry_parser import decimate_csv
from auvmission.utils.sample_data import generate_test_data_set


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("mission_tools")


def build_index(data_folder: Path, output: Path | None) -> int:
    """Scan mission folders and write the sorted manifest."""
    if not data_folder.is_dir():
        logger.error(f"Data folder does not exist: {data_folder}")
        return 1
    repo = MissionRepository(data_folder)
    path = repo.write_manifest(output)
    print(f"Generated {path.name} with {repo.mission_count} missions")
    return 0


def reduce(src: Path, dst: Path, every: int) -> int:
    """Keep every N-th telemetry row."""
    before, after = decimate_csv(src, dst, every)
    print(f"Successfully reduced data from {before} to {after} rows")
    return 0


def sample(output: Path) -> int:
    """Write synthetic mission folders."""
    folders = generate_test_data_set(output)
    print(f"Generated {len(folders)} sample missions in {output}")
    return 0


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="mission_tools")
    subparsers = parser.add_subparsers(dest="command", required=True)

    p = subparsers.add_parser("index", help="Write the mission manifest.")
    p.add_argument("data_folder", type=Path, help="Folder containing mission folders.")
    p.add_argument("--output", "-o", type=Path, default=None, help="Manifest path (default: <data_folder>/missions.json).")

    p = subparsers.add_parser("reduce", help="Decimate a telemetry CSV.")
    p.add_argument("src", type=Path, help="Source telemetry CSV.")
    p.add_argument("dst", type=Path, help="Output CSV.")
    p.add_argument("--every", type=int, default=10, help="Keep every N-th row (default: 10).")

    p = subparsers.add_parser("sample", help="Generate synthetic missions.")
    p.add_argument("output", type=Path, help="Output folder.")

    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    match args.command:
        case "index":
            return build_index(args.data_folder, args.output)
        case "reduce":
            return reduce(args.src, args.dst, args.every)
        case "sample":
            return sample(args.output)
        case _:
            return 1


if __name__ == "__main__":
    sys.exit(main())
