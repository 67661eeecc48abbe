"""ORM Models: SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - All models imported here so string-based relationship() references
      resolve before any query runs
"""

from storedir.models.user import User  # noqa: F401
from storedir.models.store import Store, StoreTag  # noqa: F401
from storedir.models.review import Review  # noqa: F401
