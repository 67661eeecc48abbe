"""Store Directory Package: stores, tags, geolocation and reviews.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
