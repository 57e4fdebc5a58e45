"""Allow running copycheck as `python -m copycheck`."""

from copycheck import main

if __name__ == "__main__":
    main()
