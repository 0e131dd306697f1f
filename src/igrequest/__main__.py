"""Main entry point for running igrequest as a module.

Usage:
    python -m igrequest request launcher/sync/ -X POST
    python -m igrequest --help
"""

from igrequest.cli import main

if __name__ == '__main__':
    main()
