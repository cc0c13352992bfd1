"""Entry point for ``python -m examtex``."""

from examtex.cli import main

raise SystemExit(main())
