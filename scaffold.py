#!/usr/bin/env python3
"""
Run db-scaffold from a source checkout without installing it.

Arguments are passed through unchanged; relative paths and ./scaffold.yaml
resolve against the directory you run it from.

Usage:
    python scaffold.py [options]

Examples:
    python scaffold.py -c postgresql+psycopg://app@localhost/shop -e
    python scaffold.py -t Users -f
"""

import os
import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent


def main() -> int:
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(
        filter(None, [str(ROOT), env.get("PYTHONPATH")])
    )
    return subprocess.call([sys.executable, "-m", "db_scaffold", *sys.argv[1:]], env=env)


if __name__ == "__main__":
    sys.exit(main())
