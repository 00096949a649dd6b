"""Domain layer for sprout.

Pure models and functions with no I/O:

- shared: Result values and the error taxonomy
- ticket: the ticket tree, navigation, search and branch naming
- workspace: worktree records
"""
