"""
lib_generator.py
Renders a NameTree into the Rust entry point (lib.rs) that declares one `pub mod` block per
scope and pulls in the generated file of every leaf with `include!`.
"""
import os
from pathlib import PurePath
from typing import List, Optional, Sequence

from errors import InvalidPathError
from name_tree import NameTree, Scope, join_name

INDENT = "    "
CONTENT_SUFFIX = ".rs"
DEFAULT_GEN_DIR = "../gen/"
RAW_IDENT_PREFIX = "r#"


def feature_name(name: Sequence[str]) -> str:
    """Cargo feature for a dotted name: escape markers dropped, segments joined with '_'."""
    segments = [s[len(RAW_IDENT_PREFIX):] if s.startswith(RAW_IDENT_PREFIX) else s for s in name]
    return '_'.join(segments)


def printable_path(path, what: str = "path") -> str:
    """
    Turn a str/bytes/PathLike into the text written into include! directives. The result
    sits inside a Rust string literal, so quotes and backslashes are rejected.
    """
    if isinstance(path, PurePath):
        path = path.as_posix()
    try:
        path = os.fspath(path)
    except TypeError as exc:
        raise InvalidPathError(f"{what} is not a path: {path!r}") from exc
    if isinstance(path, bytes):
        try:
            path = path.decode('utf-8')
        except UnicodeDecodeError as exc:
            raise InvalidPathError(f"{what} is not valid UTF-8: {path!r}") from exc
    if not path.isprintable():
        raise InvalidPathError(f"{what} contains non-printable characters: {path!r}")
    if '"' in path or '\\' in path:
        raise InvalidPathError(f"{what} cannot be written in a Rust string literal: {path!r}")
    return path


class EmitterConfig:
    def __init__(self, file_descriptor_set_path=None, split: bool = False, gen_dir=DEFAULT_GEN_DIR, features: bool = False):
        self.file_descriptor_set_path = file_descriptor_set_path
        self.split = split
        self.gen_dir = gen_dir
        self.features = features

    def __repr__(self):
        return (f"EmitterConfig(file_descriptor_set_path={self.file_descriptor_set_path!r}, split={self.split!r}, "
                f"gen_dir={self.gen_dir!r}, features={self.features!r})")

    def path_prefix(self) -> str:
        """Prefix for every included path; empty unless split mode is on."""
        if not self.split:
            return ""
        prefix = printable_path(self.gen_dir, "gen_dir")
        if prefix and not prefix.endswith('/'):
            prefix += '/'
        return prefix


def render(tree: NameTree, config: Optional[EmitterConfig] = None) -> str:
    """
    Render the whole tree. Child scopes come before the leaves of the same scope, both
    sorted, so the output is byte-for-byte reproducible.

    Paths are validated up front: an unusable gen_dir raises InvalidPathError before any
    line is produced.
    """
    config = config or EmitterConfig()
    prefix = config.path_prefix()
    lines: List[str] = []
    if config.file_descriptor_set_path is not None:
        fds_path = printable_path(config.file_descriptor_set_path, "file_descriptor_set_path")
        lines.append(f'include!("{prefix}{fds_path}");')
    _push_scope(tree.root, 0, config, prefix, lines)
    return ''.join(line + '\n' for line in lines)


def _push_scope(scope: Scope, depth: int, config: EmitterConfig, prefix: str, lines: List[str]) -> None:
    indent = INDENT * depth
    for name, child in scope.sorted_children():
        lines.append(f"{indent}pub mod {name} {{")
        _push_scope(child, depth + 1, config, prefix, lines)
        lines.append(f"{indent}}}")

    for leaf in scope.sorted_leaves():
        if config.features:
            lines.append(f'{indent}#[cfg(feature = "{feature_name(leaf)}")]')
        lines.append(f'{indent}include!("{prefix}{join_name(leaf)}{CONTENT_SUFFIX}");')
