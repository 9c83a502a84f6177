import subprocess

from cell_coercion import cell_text
from errors import ClipboardError

DEFAULT_COPY_COMMAND = ["wl-copy"]
DEFAULT_PASTE_COMMAND = ["wl-paste", "--no-newline"]


def read_clipboard(command=None) -> str:
    argv = list(command or DEFAULT_PASTE_COMMAND)
    try:
        proc = subprocess.run(argv, capture_output=True, text=True, check=True)
    except FileNotFoundError as exc:
        raise ClipboardError(f"Clipboard command not found: {argv[0]}") from exc
    except subprocess.CalledProcessError as exc:
        detail = (exc.stderr or "").strip() or f"exit status {exc.returncode}"
        raise ClipboardError(f"Clipboard read denied ({detail})") from exc
    return proc.stdout or ""


def write_clipboard(text: str, command=None) -> None:
    argv = list(command or DEFAULT_COPY_COMMAND)
    try:
        subprocess.run(argv, input=text, text=True, check=True)
    except FileNotFoundError as exc:
        raise ClipboardError(f"Clipboard command not found: {argv[0]}") from exc
    except subprocess.CalledProcessError as exc:
        raise ClipboardError(f"Clipboard write failed (exit status {exc.returncode})") from exc


def selection_to_tsv(store, layout, bounds) -> str:
    """Tab-separated text for the rows x display columns inside bounds."""
    if bounds is None:
        return ""
    r0, r1, c0, c1 = bounds
    columns = [c for c in layout.order[c0 : c1 + 1] if c in store.frame.columns]
    block = store.frame.iloc[r0 : r1 + 1][columns]
    return block.map(cell_text).to_csv(sep="\t", index=False)
