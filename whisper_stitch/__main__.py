"""Package entry point for ``python -m whisper_stitch``.

Python's ``-m`` flag looks for ``__main__.py`` inside the package and
executes it; this delegates to the CLI's main() function.
"""

from whisper_stitch.cli import main

if __name__ == "__main__":
    main()
