"""Background workers for asynchronous matching.

Tasks receive plain string ids (JSON serialisable) and open their own
database sessions through the session factory.
"""
