"""``python -m termfolio``: same as the ``termfolio`` command."""

from termfolio.cli import main

if __name__ == "__main__":
    main()
