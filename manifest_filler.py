"""
manifest_filler.py
Fills the Cargo.toml template: the `{{ features }}` placeholder is replaced with one
`"feature" = ["dep", ...]` line per feature.

feature_dependencies is a library helper for drivers that start from package imports
rather than a ready feature table; mod_wrangler.py reads the table from --feature-deps.
"""
from typing import Dict, Iterable, Mapping, Set

from errors import MissingPlaceholderError, TemplateIOError
from lib_generator import feature_name
from names_parser import parse_dotted_name

FEATURES_PLACEHOLDER = "{{ features }}"


def render_feature_entries(entries: Mapping[str, Iterable[str]]) -> str:
    lines = []
    for feature in sorted(entries):
        deps = ", ".join(f'"{dep}"' for dep in sorted(set(entries[feature])))
        lines.append(f'"{feature}" = [{deps}]\n')
    return ''.join(lines)


def fill_text(template: str, entries: Mapping[str, Iterable[str]]) -> str:
    if FEATURES_PLACEHOLDER not in template:
        raise MissingPlaceholderError(f"Manifest template has no {FEATURES_PLACEHOLDER} placeholder")
    return template.replace(FEATURES_PLACEHOLDER, render_feature_entries(entries), 1)


def fill(template_path, entries: Mapping[str, Iterable[str]]) -> str:
    """
    Read the manifest template at template_path and substitute the feature table.
    The result is returned, not written.
    """
    try:
        with open(template_path, 'r', encoding='utf-8') as f:
            template = f.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise TemplateIOError(f"Cannot read manifest template {template_path}: {exc}") from exc
    return fill_text(template, entries)


def feature_dependencies(imports: Mapping[str, Iterable[str]]) -> Dict[str, Set[str]]:
    """
    Build the feature table from package imports, e.g. {"a.b": ["a.c"]} gives
    {"a_b": {"a_c"}, "a_c": set()}. A package never depends on its own feature.
    """
    table: Dict[str, Set[str]] = {}
    for package, imported in imports.items():
        package_name = parse_dotted_name(package)
        if not package_name:
            continue
        feature = feature_name(package_name)
        deps = table.setdefault(feature, set())
        for dep_package in imported:
            dep_name = parse_dotted_name(dep_package)
            if not dep_name:
                continue
            dep = feature_name(dep_name)
            table.setdefault(dep, set())
            if dep != feature:
                deps.add(dep)
    return table
