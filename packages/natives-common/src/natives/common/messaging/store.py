import json
import os
from collections import ChainMap
from pathlib import Path
from typing import Any, Dict, List, Optional


class MessageStore:
    """
    Resolves dotted message ids to formatted strings.

    Catalogs are JSON files laid out as `<root>/<lang>/**/*.json`, each holding
    a flat mapping of message id to template. Roots earlier in the list take
    precedence. Lookup falls back to the default language, then to the id
    itself, so a missing catalog never breaks rendering.
    """

    def __init__(self, roots: Optional[List[Path]] = None, default_lang: str = "en"):
        self.roots: List[Path] = list(roots or [])
        self.default_lang = default_lang
        self._views: Dict[str, ChainMap] = {}

    def add_root(self, path: Path) -> None:
        if path not in self.roots:
            self.roots.insert(0, path)
            self._views.clear()

    def _resolve_lang(self, explicit_lang: Optional[str] = None) -> str:
        if explicit_lang:
            return explicit_lang

        env_lang = os.getenv("NATIVES_LANG")
        if env_lang:
            return env_lang

        system_lang = os.getenv("LANG")
        if system_lang:
            base_lang = system_lang.split(".")[0].split("_")[0].lower()
            if base_lang and base_lang not in ("c", "posix"):
                return base_lang

        return self.default_lang

    def _load_directory(self, directory: Path) -> Dict[str, Any]:
        registry: Dict[str, Any] = {}
        for file_path in sorted(directory.rglob("*.json")):
            try:
                with file_path.open("r", encoding="utf-8") as f:
                    data = json.load(f)
            except (json.JSONDecodeError, OSError):
                continue
            if isinstance(data, dict):
                registry.update(data)
        return registry

    def _get_or_create_view(self, lang: str) -> ChainMap:
        if lang not in self._views:
            maps = []
            for root in self.roots:
                lang_dir = root / lang
                maps.append(self._load_directory(lang_dir) if lang_dir.is_dir() else {})
            self._views[lang] = ChainMap(*maps)
        return self._views[lang]

    def lookup(self, msg_id: str, lang: Optional[str] = None) -> Optional[str]:
        target_lang = self._resolve_lang(lang)
        value = self._get_or_create_view(target_lang).get(msg_id)
        if value is None and target_lang != self.default_lang:
            value = self._get_or_create_view(self.default_lang).get(msg_id)
        return None if value is None else str(value)

    def get(self, msg_id: str, lang: Optional[str] = None, **kwargs: Any) -> str:
        template = self.lookup(str(msg_id), lang)
        if template is None:
            return str(msg_id)
        try:
            return template.format(**kwargs)
        except (KeyError, IndexError, ValueError):
            return template
