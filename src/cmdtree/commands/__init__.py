"""Built-in commands, discovered like any other command directory.

Each module here maps to a command by file name (``help.py`` -> ``help``).
This file is an index at the top of the search root and maps to nothing.
"""
