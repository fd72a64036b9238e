"""Allow ``python -m fontmap``."""

from .cli import main

main()
