"""
Contract Deployment Wrapper
Runs main.py and propagates its exit code
"""

import subprocess
import sys


def deploy(args=None) -> int:
    print("=" * 70)
    print("Aurora Contract Deployment")
    print("=" * 70)
    print()

    # Run deployment
    result = subprocess.run(
        [sys.executable, "main.py", *(args or [])],
        cwd="."
    )

    return result.returncode


if __name__ == "__main__":
    sys.exit(deploy(sys.argv[1:]))
