"""Record invocation fixtures from the test suite, then replay them.

Every test that goes through the ``invoke_test`` fixture contributes one case.
Unless ``--no-verify`` is given, the freshly written fixtures are replayed with
``consume.check_fixtures`` so a recording that cannot be reproduced fails here.
"""

from __future__ import annotations

import argparse
import os
import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT / "tools"))

from consume import check_fixtures  # noqa: E402


def main() -> int:
    parser = argparse.ArgumentParser(description="Generate campaign invocation fixtures")
    parser.add_argument("--output", default=str(ROOT / "fixtures"), help="Fixture output directory")
    parser.add_argument("-k", dest="keyword", default=None, help="Only record tests matching this expression")
    parser.add_argument("--no-verify", action="store_true", help="Skip replaying the recorded fixtures")
    args = parser.parse_args()

    out = Path(args.output)
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join([str(ROOT / "src"), str(ROOT)])

    cmd = [sys.executable, "-m", "pytest", str(ROOT / "tests"), "-q", "--output", str(out)]
    if args.keyword:
        cmd += ["-k", args.keyword]
    print("Running:", " ".join(cmd))
    status = subprocess.call(cmd, env=env, cwd=str(ROOT))
    if status != 0 or args.no_verify:
        return status

    failures = check_fixtures(out)
    for f in failures:
        print("FAIL", f)
    print(f"Replayed fixtures in {out}: {len(failures)} failures")
    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
