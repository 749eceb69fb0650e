"""
Core utilities shared across the AnimalSOS backend.

This package hosts configuration, password hashing and logging setup.
Services and routers depend on these primitives instead of reading
os.environ or configuring handlers themselves.
"""
