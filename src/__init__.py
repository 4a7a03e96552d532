"""
Package marker for the users and products service under `src`.
The HTTP layer lives in `src.api`; shared settings and logging helpers live in `src.common`.
"""
