"""Logo Studio interface adapters.

Architectural role:
- Defines the external interaction boundary: the HTTP relay and the terminal studio.
- Performs transport-level validation and response shaping.
- Delegates generation to `llm.service` (relay) or `core.engine` (studio).
"""
