from __future__ import annotations

from arweave_dump.cli import app

if __name__ == "__main__":
    app(prog_name="arweave-dump")
