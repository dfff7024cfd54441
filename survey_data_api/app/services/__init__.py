"""
Service layer abstraction.

Services encapsulate business logic and are handed their store
explicitly, so API handlers never touch persistence directly.
"""
