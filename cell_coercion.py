import pandas as pd


def is_blank(value) -> bool:
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def cell_text(value) -> str:
    """Render a stored scalar the way search, replace and export see it."""
    if is_blank(value):
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def fold_case(text: str) -> str:
    """Lower-case text without changing its length.

    Offsets found in the folded text index the original text. Characters
    whose lower-case form is longer (e.g. "İ") are kept as they are.
    """
    lowered = text.lower()
    if len(lowered) == len(text):
        return lowered
    return "".join(c.lower() if len(c.lower()) == 1 else c for c in text)
