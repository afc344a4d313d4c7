"""Allow ``python -m chartgallery``."""
from chartgallery.main import main

if __name__ == "__main__":
    main()
