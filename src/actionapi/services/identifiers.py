import uuid


def new_id() -> str:
    """Return a fresh random UUID in canonical string form.

    Exhausting the OS entropy source raises straight through; there is no fallback.
    """
    return str(uuid.uuid4())
