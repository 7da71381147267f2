from lark import Lark, Transformer
from lark.exceptions import UnexpectedInput

from errors import StructuralError


# Names list: whitespace separated dotted names, `//` comments
names_grammar = r"""
    start: dotted_name*
    dotted_name: DOTTED_NAME

    DOTTED_NAME: SEGMENT ("." SEGMENT)*
    SEGMENT: /(?:r#)?[a-zA-Z_][a-zA-Z0-9_]*/

    LOCAL_COMMENT: /\/\/[^\n]*/
    %import common.WS
    %ignore WS
    %ignore LOCAL_COMMENT
"""

# Feature dependency table: `feature = [dep, "dep-2"]`
features_grammar = r"""
    start: entry*
    entry: name "=" "[" deps? "]"
    deps: name ("," name)*
    name: FEATURE_NAME | ESCAPED_STRING

    FEATURE_NAME: /[a-zA-Z_][a-zA-Z0-9_\-]*/

    LOCAL_COMMENT: /\/\/[^\n]*/
    %import common.ESCAPED_STRING
    %import common.WS
    %ignore WS
    %ignore LOCAL_COMMENT
"""

names_parser = Lark(names_grammar, start=['start', 'dotted_name'], parser='lalr')
features_parser = Lark(features_grammar, start='start', parser='lalr')


class DottedNameTransformer(Transformer):
    def start(self, items):
        return list(items)

    def dotted_name(self, items):
        return tuple(str(items[0]).split('.'))


class FeatureTableTransformer(Transformer):
    def start(self, items):
        table = {}
        for feature, deps in items:
            table.setdefault(feature, set()).update(deps)
        return table

    def entry(self, items):
        deps = items[1] if len(items) > 1 else set()
        return items[0], deps

    def deps(self, items):
        return set(items)

    def name(self, items):
        token = items[0]
        if token.type == 'ESCAPED_STRING':
            return str(token)[1:-1]
        return str(token)


def _parse(parser, text, transformer, start):
    try:
        tree = parser.parse(text, start=start)
    except UnexpectedInput as exc:
        raise StructuralError(f"Malformed input near {exc.get_context(text).strip()!r}",
                              getattr(exc, 'line', None), getattr(exc, 'column', None)) from exc
    return transformer.transform(tree)


def parse_dotted_name(text):
    """
    Split a dotted name such as 'a.r#type.c' into its segments.
    Blank text yields an empty name, which NameTree.insert ignores.
    """
    if not text.strip():
        return ()
    return _parse(names_parser, text.strip(), DottedNameTransformer(), start='dotted_name')


def parse_names(text):
    return _parse(names_parser, text, DottedNameTransformer(), start='start')


def parse_feature_table(text):
    return _parse(features_parser, text, FeatureTableTransformer(), start='start')


def _read_text(path):
    with open(path, 'r', encoding='utf-8') as f:
        try:
            return f.read()
        except UnicodeDecodeError as exc:
            raise StructuralError(f"{path} is not valid UTF-8: {exc}") from exc


def load_names_file(path):
    return parse_names(_read_text(path))


def load_feature_table_file(path):
    return parse_feature_table(_read_text(path))
