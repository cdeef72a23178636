"""doc-spine core -- domain-agnostic primitives used by the workflow engine.

Architecture::

    errors.py      Structured error hierarchy (DocSpineError and friends)
    result.py      Result[T] envelope (Ok / Err) for expected outcomes
    timestamps.py  ULID generation + UTC helpers (stdlib-only)
    logging.py     Structured logging (structlog)
    settings.py    DocSpineSettings (pydantic-settings)
    events/        TransitionEvent + SubscriberRegistry

``settings`` is not imported here so that pydantic-settings is only loaded by
hosts that use it.
"""
