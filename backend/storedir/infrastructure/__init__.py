"""Infrastructure: async database sessions, SQL repositories, structured logging.

Invariants:
    - Implements the Protocols declared in core/repository_protocols.py
    - Only layer that imports SQLAlchemy session machinery
"""
