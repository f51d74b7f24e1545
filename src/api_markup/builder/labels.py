"""Localization table: heading and label texts per output language."""

from functools import lru_cache
from pathlib import Path

import yaml

I18N_DIR = Path(__file__).parent.parent / "i18n"

DEFAULT_LANGUAGE = "en"


@lru_cache(maxsize=None)
def load_table(language: str) -> dict[str, str]:
    """Load the label table of ``language``; empty when the language is unknown."""
    path = I18N_DIR / f"labels_{language}.yaml"
    if not path.exists():
        return {}
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    return {str(k): str(v) for k, v in data.items() if v}


def supported_languages() -> list[str]:
    return sorted(p.stem.removeprefix("labels_") for p in I18N_DIR.glob("labels_*.yaml"))


def translate(key: str, language: str) -> str:
    """Text for ``key`` in ``language``, else in the default language, else the key itself."""
    return load_table(language).get(key) or load_table(DEFAULT_LANGUAGE).get(key) or key


class Labels:
    """Label lookup bound to one output language."""

    def __init__(self, language: str = DEFAULT_LANGUAGE):
        self.language = getattr(language, "value", language)

    def get(self, key: str) -> str:
        return translate(key, self.language)

    def table(self) -> dict[str, str]:
        """Every label of the default table, translated."""
        return {key: self.get(key) for key in load_table(DEFAULT_LANGUAGE)}
