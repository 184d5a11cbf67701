"""consolectl — browse, select and download developer console workspaces.

Keeps an Org → Project → Workspace selection in local configuration and
talks to the console service through a strict layered architecture.
"""

from consolectl.version import __version__

__all__: list[str] = ["__version__"]
