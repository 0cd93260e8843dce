"""Shorthand git workflow commands.

Features:
- Create a branch and push it to origin in one step
- Push the current branch with upstream tracking
- Pull or fetch with pruning, deleting local branches removed from origin
- Add, commit and push with a timestamped message
"""

__version__ = "0.1.0"
