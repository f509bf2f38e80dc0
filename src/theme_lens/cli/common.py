from pathlib import Path

from theme_lens.core.docset import DocsetData, FileDocset, StaticDocset
from theme_lens.core.ports.docset import ThemeDocset


def load_docset(docs: Path | None) -> ThemeDocset:
    """The catalog from a local JSON file, or an empty one."""
    if docs is None:
        return StaticDocset(DocsetData())
    return FileDocset(docs)
