"""Allow ``python -m bible_reader``."""

from bible_reader.cli import main

main()
