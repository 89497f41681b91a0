"""Client-side synchronization layer for the remote salon API.

Nothing in this package reads Django settings: every object is constructed
explicitly and handed its collaborators, so the same classes serve the web
process (request-scoped) and the management commands (process-scoped).
"""
