"""Shared CLI helpers."""

from __future__ import annotations

import argparse

from surveyai import __version__


def base_parser(name: str, description: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=name, description=description)
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser
