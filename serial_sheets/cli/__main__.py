from __future__ import annotations

from serial_sheets.cli.commands import main

if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
