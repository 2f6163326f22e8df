"""
Cross-cutting building blocks: settings, error taxonomy, request context
and error tracking.
"""
