"""
Application Layer

Contains use cases, command handlers, and application services.
This layer orchestrates domain objects and infrastructure to fulfill use cases.

Structure:
- commands/: Write operations (play request, control dispatch)
- services/: Session registry, per-guild playback engine, background jobs
- interfaces/: Port interfaces for infrastructure adapters
"""
