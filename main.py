from __future__ import annotations

from graphics2.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
