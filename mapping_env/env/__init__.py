"""
Typed environment parsing, the raw/derived mapping configuration, and errors.
"""
