"""
name_tree.py
Tree of nested scopes built from dotted names. Each scope owns its child scopes and the
full names of the leaves that end at it; lib_generator walks it top-down.
"""
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from names_parser import parse_dotted_name

DottedName = Tuple[str, ...]


def join_name(name: Sequence[str]) -> str:
    return '.'.join(name)


class Scope:
    def __init__(self):
        self.children: Dict[str, 'Scope'] = {}
        self.leaves: List[DottedName] = []

    def child(self, segment: str) -> 'Scope':
        scope = self.children.get(segment)
        if scope is None:
            scope = self.children[segment] = Scope()
        return scope

    def sorted_children(self) -> List[Tuple[str, 'Scope']]:
        return sorted(self.children.items())

    def sorted_leaves(self) -> List[DottedName]:
        return sorted(self.leaves, key=join_name)

    def __repr__(self):
        return f"Scope(children={sorted(self.children)!r}, leaves={[join_name(l) for l in self.leaves]!r})"


class NameTree:
    """
    Trie of scopes keyed by name segments. The root scope has no name and is never
    declared itself; only its children and leaves are emitted.
    """
    def __init__(self):
        self.root = Scope()

    @classmethod
    def from_names(cls, names: Iterable[Union[str, Sequence[str]]]) -> 'NameTree':
        tree = cls()
        for name in names:
            if isinstance(name, str):
                tree.insert_dotted(name)
            else:
                tree.insert(name)
        return tree

    def insert(self, name: Sequence[str]) -> None:
        """
        Add a name: a scope is created on demand for every segment but the last, and the
        innermost one records the full name, so "a.b" lands in scope "a" and "x" at the
        root. Inserting a name twice records it twice; an empty name changes nothing.
        """
        name = tuple(name)
        if not name:
            return
        scope = self.root
        for segment in name[:-1]:
            scope = scope.child(segment)
        scope.leaves.append(name)

    def insert_dotted(self, text: str) -> None:
        self.insert(parse_dotted_name(text))

    def find(self, path: Sequence[str]) -> Optional[Scope]:
        scope = self.root
        for segment in path:
            scope = scope.children.get(segment)
            if scope is None:
                return None
        return scope

    def leaves(self) -> Iterator[DottedName]:
        """All recorded names, in the order the emitter writes them."""
        def walk(scope):
            for _, child in scope.sorted_children():
                yield from walk(child)
            yield from scope.sorted_leaves()
        return walk(self.root)

    def is_empty(self) -> bool:
        return not self.root.children and not self.root.leaves
