"""
Server actions: the request-scoped operations the UI layer invokes.

Every action takes the database session and the caller explicitly, runs as
one unit of work and returns an ActionResult. No exception escapes an action.
"""
