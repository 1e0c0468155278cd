#!/usr/bin/env python3
# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
# Purpose: Verifies every Python source carries the license header and a one-line Purpose comment.

import os
import re
import sys

HEADER_WINDOW = 1200
IGNORE_DIRS = {
    "venv",
    ".venv",
    "__pycache__",
    ".git",
    ".pytest_cache",
    "dist",
    "build",
    "yawt.egg-info",
}
PURPOSE_RE = re.compile(r"^\s*#\s*Purpose:\s+.+$", re.MULTILINE)


def check_copyright(directory):
    """Return ``(missing_copyright, missing_purpose)`` path lists for ``directory``."""
    missing_copyright = []
    missing_purpose = []

    for root, dirs, files in os.walk(directory):
        dirs[:] = sorted(d for d in dirs if d not in IGNORE_DIRS)

        for name in sorted(files):
            if not name.endswith(".py"):
                continue
            path = os.path.join(root, name)
            try:
                with open(path, "r", encoding="utf-8") as f:
                    head = f.read(HEADER_WINDOW)
            except (OSError, UnicodeDecodeError) as e:
                print(f"Error reading {path}: {e}")
                missing_copyright.append(path)
                continue

            if "Copyright (C)" not in head:
                missing_copyright.append(path)
            if not PURPOSE_RE.search(head):
                missing_purpose.append(path)

    return missing_copyright, missing_purpose


def main(argv):
    root_dir = argv[1] if len(argv) > 1 else os.getcwd()
    print(f"Checking source headers in {root_dir}...")
    missing_copyright, missing_purpose = check_copyright(root_dir)

    if not (missing_copyright or missing_purpose):
        print("All checks passed.")
        return 0

    if missing_copyright:
        print("\nMissing Copyright Notice in:")
        for f in missing_copyright:
            print(f"  {os.path.relpath(f, root_dir)}")
    if missing_purpose:
        print("\nMissing Purpose Header in:")
        for f in missing_purpose:
            print(f"  {os.path.relpath(f, root_dir)}")
    return 1


if __name__ == "__main__":
    sys.exit(main(sys.argv))
