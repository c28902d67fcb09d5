"""
Localization file formats.

Each handler reads a localization file into a nested dictionary and writes
one back in the same format. The handler is chosen from the file extension:
    - .json: pretty-printed JSON, non-ASCII characters kept as-is
    - .yaml / .yml: block-style YAML via PyYAML's safe loader and dumper

License: MIT
"""

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from ..config.settings import JSON_INDENT
from ..core.exceptions import LangFileError

PathLike = Union[str, Path]


class LangFileHandler(ABC):
    """Read and write one localization file format."""

    extensions: tuple = ()

    def load(self, path: PathLike) -> Dict[str, Any]:
        """
        Load a localization file as a nested dictionary.

        Args:
            path: The file to read.

        Returns:
            The translation tree. An empty document yields {}.

        Raises:
            LangFileError: If the file cannot be read, cannot be parsed, or
                does not hold a mapping at the top level.
        """
        path = Path(path)

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = self._parse(f.read())
        except OSError as e:
            raise LangFileError(f"Could not read {path}: {e}") from e
        except ValueError as e:
            raise LangFileError(f"Invalid translation file format: {path}: {e}") from e

        if data is None:
            return {}

        if not isinstance(data, dict):
            raise LangFileError(
                f"Invalid translation file format: {path} holds "
                f"{type(data).__name__}, expected a mapping"
            )

        return data

    def save(self, path: PathLike, tree: Dict[str, Any]) -> None:
        """
        Write a translation tree, creating parent folders as needed.

        Raises:
            LangFileError: If the file cannot be written.
        """
        path = Path(path)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                f.write(self._serialize(tree))
        except OSError as e:
            raise LangFileError(f"Could not write {path}: {e}") from e

    @abstractmethod
    def _parse(self, content: str) -> Any:
        """Decode file content; raise ValueError on malformed input."""

    @abstractmethod
    def _serialize(self, tree: Dict[str, Any]) -> str:
        """Encode a tree as file content."""


class JsonLangFile(LangFileHandler):
    extensions = (".json",)

    def _parse(self, content: str) -> Any:
        if not content.strip():
            return None
        return json.loads(content)

    def _serialize(self, tree: Dict[str, Any]) -> str:
        return json.dumps(tree, indent=JSON_INDENT, ensure_ascii=False) + "\n"


class YamlLangFile(LangFileHandler):
    extensions = (".yaml", ".yml")

    def _parse(self, content: str) -> Any:
        try:
            return yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ValueError(str(e)) from e

    def _serialize(self, tree: Dict[str, Any]) -> str:
        return yaml.safe_dump(
            tree,
            allow_unicode=True,
            sort_keys=False,
            default_flow_style=False,
        )


_HANDLERS = {
    extension: handler
    for handler in (JsonLangFile(), YamlLangFile())
    for extension in handler.extensions
}


def is_supported(path: PathLike) -> bool:
    """True if the file extension has a handler."""
    return Path(path).suffix.lower() in _HANDLERS


def get_handler(path: PathLike) -> LangFileHandler:
    """
    Get the handler for a file, based on its extension.

    Raises:
        LangFileError: If the extension is not supported.

    Example:
        >>> type(get_handler("lang/en/auth.yaml")).__name__
        'YamlLangFile'
    """
    extension = Path(path).suffix.lower()

    if extension not in _HANDLERS:
        raise LangFileError(f"Unsupported file format: {extension or path}")

    return _HANDLERS[extension]
