"""EDM annotations for domain classes and the reflection over them.

This package defines *how* a domain class declares its entity set, keys and
navigation properties, independent from *where* instances are stored.
"""
