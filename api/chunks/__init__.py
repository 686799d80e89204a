"""
The chunk resource: schemas, SQL, and HTTP handlers.
"""
