"""Allow ``python -m overlayqueue``."""

from overlayqueue.cli import run

if __name__ == "__main__":
    run()
