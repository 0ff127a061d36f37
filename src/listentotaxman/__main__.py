"""Allow ``python -m listentotaxman``."""

from listentotaxman.cli import main

raise SystemExit(main())
