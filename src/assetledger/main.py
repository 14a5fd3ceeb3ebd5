#!/usr/bin/env python3

from __future__ import annotations

from signal import SIGINT, signal

from dotenv import load_dotenv

from assetledger.ui.cli import main, sigint_handler


def run() -> None:
    """Console script entry point: load ``.env`` and hand over to the CLI."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
