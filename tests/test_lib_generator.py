from pathlib import Path
import pytest
from errors import InvalidPathError
from lib_generator import EmitterConfig, feature_name, printable_path, render
from name_tree import NameTree
from tests.test_utils import check_balanced, generate_random_dotted_names

SCENARIO_NAMES = ["a.b", "a.c", "x"]

def test_render_plain():
    tree = NameTree.from_names(SCENARIO_NAMES)
    assert render(tree) == (
        'pub mod a {\n'
        '    include!("a.b.rs");\n'
        '    include!("a.c.rs");\n'
        '}\n'
        'include!("x.rs");\n'
    )

def test_render_split_prefixes_every_include():
    tree = NameTree.from_names(SCENARIO_NAMES)
    output = render(tree, EmitterConfig(split=True))
    assert output == (
        'pub mod a {\n'
        '    include!("../gen/a.b.rs");\n'
        '    include!("../gen/a.c.rs");\n'
        '}\n'
        'include!("../gen/x.rs");\n'
    )

def test_render_feature_guards():
    tree = NameTree.from_names(SCENARIO_NAMES)
    lines = render(tree, EmitterConfig(features=True)).splitlines()
    index = lines.index('    include!("a.b.rs");')
    assert lines[index - 1] == '    #[cfg(feature = "a_b")]'
    assert lines[-2:] == ['#[cfg(feature = "x")]', 'include!("x.rs");']

def test_render_split_with_features():
    tree = NameTree.from_names(["a.r#type"])
    assert render(tree, EmitterConfig(split=True, features=True)) == (
        'pub mod a {\n'
        '    #[cfg(feature = "a_type")]\n'
        '    include!("../gen/a.r#type.rs");\n'
        '}\n'
    )

def test_render_file_descriptor_set_first():
    tree = NameTree.from_names(["a.b"])
    output = render(tree, EmitterConfig(file_descriptor_set_path="descriptors.rs"))
    assert output.splitlines()[0] == 'include!("descriptors.rs");'
    output = render(tree, EmitterConfig(file_descriptor_set_path="descriptors.rs", split=True, features=True))
    assert output.splitlines()[0] == 'include!("../gen/descriptors.rs");'

def test_render_scopes_before_leaves_and_sorted():
    tree = NameTree.from_names(["zeta", "b.x", "alpha", "a.y"])
    assert render(tree) == (
        'pub mod a {\n'
        '    include!("a.y.rs");\n'
        '}\n'
        'pub mod b {\n'
        '    include!("b.x.rs");\n'
        '}\n'
        'include!("alpha.rs");\n'
        'include!("zeta.rs");\n'
    )

def test_render_deep_nesting_indentation():
    tree = NameTree.from_names(["a.b.c.d"])
    assert render(tree) == (
        'pub mod a {\n'
        '    pub mod b {\n'
        '        pub mod c {\n'
        '            include!("a.b.c.d.rs");\n'
        '        }\n'
        '    }\n'
        '}\n'
    )

def test_render_empty_tree():
    assert render(NameTree()) == ""

def test_render_is_idempotent():
    tree = NameTree.from_names(generate_random_dotted_names(count=40))
    config = EmitterConfig(split=True, features=True)
    assert render(tree, config) == render(tree, config)

def test_render_random_trees_are_balanced():
    for _ in range(10):
        names = generate_random_dotted_names(count=30, max_depth=7)
        output = render(NameTree.from_names(names))
        depth = check_balanced(output)
        assert depth <= 6
        assert output.count('include!(') == len(names)

def test_feature_gating_only_adds_guards():
    tree = NameTree.from_names(generate_random_dotted_names(count=30))
    plain = render(tree).splitlines()
    gated = render(tree, EmitterConfig(features=True)).splitlines()
    assert [l for l in gated if '#[cfg(' not in l] == plain
    guards = [l for l in gated if '#[cfg(' in l]
    assert len(guards) == len([l for l in plain if 'include!(' in l])

def test_feature_name():
    assert feature_name(("a", "b")) == "a_b"
    assert feature_name(("google", "r#type", "v1")) == "google_type_v1"
    assert feature_name(("x",)) == "x"

def test_gen_dir_gets_trailing_separator():
    tree = NameTree.from_names(["x"])
    assert render(tree, EmitterConfig(split=True, gen_dir=Path("out") / "gen")) == 'include!("out/gen/x.rs");\n'
    assert render(tree, EmitterConfig(split=True, gen_dir=b"../gen/")) == 'include!("../gen/x.rs");\n'

def test_gen_dir_ignored_without_split():
    tree = NameTree.from_names(["x"])
    assert render(tree, EmitterConfig(gen_dir="bad\npath")) == 'include!("x.rs");\n'

@pytest.mark.parametrize("gen_dir", ["bad\npath/", b"\xff\xfe/", 42, 'ge"n/', "C:\\gen\\"])
def test_invalid_gen_dir_fails_before_render(gen_dir):
    tree = NameTree.from_names(["x"])
    with pytest.raises(InvalidPathError):
        render(tree, EmitterConfig(split=True, gen_dir=gen_dir))

def test_invalid_file_descriptor_set_path():
    with pytest.raises(InvalidPathError):
        render(NameTree(), EmitterConfig(file_descriptor_set_path="a\tb"))

def test_printable_path():
    assert printable_path(Path("a") / "b") == "a/b"
    assert printable_path(b"gen") == "gen"

@pytest.mark.parametrize("fds_path", ['descriptors"x.rs', "gen\\descriptors.rs"])
def test_file_descriptor_set_path_must_fit_string_literal(fds_path):
    with pytest.raises(InvalidPathError):
        render(NameTree.from_names(["x"]), EmitterConfig(file_descriptor_set_path=fds_path))

def test_pure_windows_path_rendered_with_forward_slashes():
    from pathlib import PureWindowsPath
    tree = NameTree.from_names(["x"])
    output = render(tree, EmitterConfig(split=True, gen_dir=PureWindowsPath("C:/gen")))
    assert output == 'include!("C:/gen/x.rs");\n'
