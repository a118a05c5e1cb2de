"""
mapping_env – environment-variable configuration for mapping handlers.

Parses typed scalars from the process environment into a raw configuration
object, then derives the runtime-facing configuration in natural units.
"""
