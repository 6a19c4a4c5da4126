"""Rate limiting adapters.

The limiter keeps its per-client counters in the content store, behind a
small abstraction so the counter storage can change without touching the
submission pipeline.
"""
