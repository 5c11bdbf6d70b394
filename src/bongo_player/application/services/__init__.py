"""
Application Services

Session registry with its per-guild actor, the playback engine, and the
background runner for deferred play requests.
"""
