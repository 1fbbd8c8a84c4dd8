#!/usr/bin/env python3
"""tree_list - list every file below a directory.

Usage:
  treewalk [--relative] [--digest ALGO] [--save OUTPUT_FILE] [--verbose]
           [--config FILE.yml] root

  Options may also be read from a YAML file given with --config. Flags on the
  command line override the file.
"""

import argparse
import hashlib
import json
import os
import sys
import time

import yaml

from treewalk.lib.digest import file_digest
from treewalk.lib.enumerator import DirectoryTreeEnumerator

DEFAULT_FLAGS = {
    "relative": False,
    "digest": None,
    "save": None,
    "verbose": False,
}


# ============================================================================
# Configuration
# ============================================================================

def load_config(path: str) -> dict:
    """
    Load flag values from a YAML file.

    Args:
        path: Path to a YAML file holding a mapping of flag names to values

    Returns:
        Dictionary of flag values found in the file

    Raises:
        ValueError: If the file is not a mapping or names an unknown flag
    """
    with open(path, mode='r') as f:
        data = yaml.load(f, Loader=yaml.FullLoader)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")

    unknown = sorted(set(data) - set(DEFAULT_FLAGS))
    if unknown:
        raise ValueError(f"Unknown keys in config file {path}: {', '.join(unknown)}")
    return data


def build_flags(args) -> dict:
    """Merge defaults, the config file and explicit command line flags."""
    flags = dict(DEFAULT_FLAGS)
    if args.config:
        flags.update(load_config(args.config))
    for key in DEFAULT_FLAGS:
        value = getattr(args, key)
        if value is not None:
            flags[key] = value

    if flags["digest"] and flags["digest"] not in hashlib.algorithms_available:
        raise ValueError(f"Unknown digest algorithm: {flags['digest']}")
    return flags


# ============================================================================
# Listing
# ============================================================================

def write_tree(output_file: str, items) -> None:
    with open(output_file, 'w') as f:
        json.dump(items, f, indent=2)


def list_tree(root: str, flags: dict, out=None) -> int:
    """
    Print every file below root, one per line.

    Args:
        root: Directory to enumerate
        flags: Dictionary of flag values, see DEFAULT_FLAGS
        out: Stream to print to (default: sys.stdout)

    Returns:
        Number of files listed
    """
    out = out or sys.stdout
    verbose = flags["verbose"]
    start = time.monotonic()
    if verbose:
        print(f"Scanning tree: {root}", file=sys.stderr)

    items = []
    count = 0
    for path in DirectoryTreeEnumerator(root):
        shown = os.path.relpath(path, root) if flags["relative"] else path
        item = {"path": shown}
        if flags["digest"]:
            item["digest"] = file_digest(path, flags["digest"])
            print(f"{item['digest']}  {shown}", file=out)
        else:
            print(shown, file=out)
        count += 1
        if flags["save"]:
            items.append(item)

    if verbose:
        elapsed = int((time.monotonic() - start) * 1000)
        print(f"Found {count} files in {elapsed} ms", file=sys.stderr)

    if flags["save"]:
        write_tree(flags["save"], items)
        if verbose:
            print(f"Saved to {flags['save']}", file=sys.stderr)
    return count


# ============================================================================
# Main
# ============================================================================

def main(argv=None):
    parser = argparse.ArgumentParser(
        description="List the files in a directory tree, depth first.",
        fromfile_prefix_chars="@",
    )
    parser.add_argument(
        "--config",
        metavar="FILE",
        help="YAML file with default values for the flags below"
    )
    parser.add_argument(
        "--relative",
        default=None,
        action=argparse.BooleanOptionalAction,
        help="Print paths relative to the root (default: False)"
    )
    parser.add_argument(
        "--digest",
        metavar="ALGO",
        help="Print a hex digest of each file, e.g. sha1 or sha256"
    )
    parser.add_argument(
        "--save",
        metavar="OUTPUT_FILE",
        help="Also save the listing as JSON"
    )
    parser.add_argument(
        "--verbose",
        default=None,
        action=argparse.BooleanOptionalAction,
        help="Report progress on stderr (default: False)"
    )
    parser.add_argument("root", help="Directory to list")

    args = parser.parse_args(argv)

    try:
        flags = build_flags(args)
        list_tree(args.root, flags)
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
