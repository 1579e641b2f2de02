"""
Entry point for running the CLI as a module.

Usage:
    python -m pitchscout <command>
"""

from pitchscout.cli import cli

if __name__ == "__main__":
    cli()
