import os


def resolve_model_dir(relative_path: str) -> str:
    """Resolve a SavedModel directory path.

    - Absolute paths are returned unchanged.
    - Otherwise the first existing directory among project root and cwd wins.
    - Falls back to the original relative path if nothing is found.
    """
    if not relative_path:
        return relative_path
    if os.path.isabs(relative_path):
        return relative_path

    candidates = [
        # Project root (two levels up from this file)
        os.path.join(os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..")), relative_path),
        os.path.join(os.getcwd(), relative_path),
    ]
    for cand in candidates:
        if os.path.isdir(cand):
            return cand

    return relative_path
