"""Module entrypoint for `python -m orgdrill`."""

from orgdrill.cli.main import main

if __name__ == "__main__":  # pragma: no cover
    main()
