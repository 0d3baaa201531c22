"""Allow running as ``python -m tapeglitch``."""

from tapeglitch.cli import main

main()
