"""Core studio package.

Composition:
    - `types`: request/result/history/session data contracts.
    - `errors`: failure taxonomy shared by relay and client.
    - `validation`: local request rules applied before any network call.
    - `history`: bounded in-memory history of successful generations.
    - `engine`: per-mode state machine driving generation.
"""
