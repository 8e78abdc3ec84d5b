"""Allow ``python -m mediagallery``."""

from mediagallery.cli.main import main

if __name__ == "__main__":
    main()
