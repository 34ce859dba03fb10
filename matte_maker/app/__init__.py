"""UI-facing application facade and state objects.

- Single command entry: backend.dispatch(cmd, payload)
- UI binding via the state QObject (backend.matte)
- Python→UI notifications via backend.event / backend.taskEvent
"""
