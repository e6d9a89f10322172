"""ID generation helpers."""

import uuid


def generate_request_id() -> str:
    """Generate a short, unique request ID."""
    return f"req_{uuid.uuid4().hex[:16]}"
