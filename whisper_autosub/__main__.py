"""Package entry point for ``python -m whisper_autosub``.

WHY: Users run the tool as ``python -m whisper_autosub transcribe ...``.
Python's ``-m`` flag looks for ``__main__.py`` inside the package and
executes it.

HOW: Delegates to the CLI's main() function.
"""

from whisper_autosub.cli import main

if __name__ == "__main__":
    main()
