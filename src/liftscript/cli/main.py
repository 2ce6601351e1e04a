"""
CLI entry point using Typer.

Commands:
- show / days / steps: view the current workout
- edit / new / log: change the current workout text
- run: guided session that writes results back
- save / load / list / delete: saved-workout library
- share / import: exchange workouts by short code
"""

from .app import app
from .commands import library, session, workouts  # noqa: F401  (registers commands)

__all__ = ["app"]


if __name__ == "__main__":
    app()
