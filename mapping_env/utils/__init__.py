"""
Generic utilities shared across modules.

Currently holds the logging setup used by entry points and actions.
"""
