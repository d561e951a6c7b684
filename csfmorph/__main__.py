"""Entry point for running csfmorph as a module."""

from csfmorph.cli_entry import main

if __name__ == "__main__":
    main()
