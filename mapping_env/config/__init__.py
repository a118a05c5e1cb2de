"""
Settings loading for the process: .env handling, the aggregate Settings object,
and the lazily built settings singleton.
"""
