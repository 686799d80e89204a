"""
Process-wide plumbing: flags, the connection pool, loggers, and the
application context handed to every handler.
"""
