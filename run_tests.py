#!/usr/bin/env python3
"""
Test runner for the URL shortener project.

Usage:
    python run_tests.py                 # whole suite
    python run_tests.py -k concurrent   # extra arguments go to pytest
"""

import subprocess
import sys
import os


def run_tests(extra_args):
    """Run pytest from the project root and return its exit code"""
    print("🧪 Running URL Shortener Tests")
    print("=" * 40)

    os.chdir(os.path.dirname(os.path.abspath(__file__)))

    command = [sys.executable, "-m", "pytest", "tests/", "-v", "--tb=short", *extra_args]
    try:
        subprocess.run(command, check=True)
    except subprocess.CalledProcessError as e:
        print(f"\n❌ Tests failed with exit code {e.returncode}")
        return e.returncode

    print("\n✅ All tests passed!")
    return 0


if __name__ == "__main__":
    sys.exit(run_tests(sys.argv[1:]))
