"""Use-case / operations layer.

High-level actions invoked by the UI/backend: document transitions,
save/load, and render/command preparation. Nothing here imports Qt.
"""
