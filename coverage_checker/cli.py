"""
CLI entry point for the coverage-check command.
"""
import sys

from coverage_checker.runner import main

# Re-export main for the console_scripts entry point
__all__ = ['main']

if __name__ == '__main__':
    sys.exit(main())
