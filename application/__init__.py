"""
Application layer for the workout logger.

This package contains:
- ports/: Abstract interfaces for storage, scheduling and transport
- draft_store: Local draft persistence over a key-value storage port
- debounce: Cancellable, flushable scheduled task
- session_engine: The logging session state machine
"""
