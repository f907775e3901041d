"""Infrastructure layer.

Configuration, database sessions, logging and the application context.
"""
