"""Application services.

Import from the submodules directly, this package re-exports nothing (the
fetchers import race_coordinator from here).
"""
