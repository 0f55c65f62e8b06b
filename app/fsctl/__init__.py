"""fsctl - interactive command-line file manager.

Resolves create, copy, move, rename and delete intents through validation,
conflict detection and confirmation before touching the filesystem.
"""

__version__ = "0.1.0"
