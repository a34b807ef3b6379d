"""Entry point for running promptboost as a module.

This allows running: python -m promptboost
"""

from .cli import main

if __name__ == "__main__":
    # main() is the CLI boundary and already maps failures to exit codes.
    main()
