"""Allow ``python -m bkup``."""
from bkup.cli import main

if __name__ == "__main__":
    main()
