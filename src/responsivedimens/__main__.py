"""Entry point for `python -m responsivedimens`."""
from responsivedimens.main import main

raise SystemExit(main())
