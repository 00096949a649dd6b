"""Infrastructure layer for sprout.

Concrete providers behind the application ports:

- git: worktrees via the ``git`` and ``gh`` command line tools
- linear: tickets via the Linear GraphQL API
- memory: in-memory fakes of both
"""
