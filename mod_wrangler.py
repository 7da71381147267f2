#!/usr/bin/env python3
"""
ModWrangler

This script takes the list of generated packages (dotted names such as 'a.b.c') and writes the
Rust lib.rs that nests them into `pub mod` blocks and includes each package's generated file.
It can also fill a Cargo.toml template with the feature table that gates those includes.

Usage:
    python mod_wrangler.py --names <names_file> --output <lib_rs> [--split] [--gen-dir <dir>] [--features]
                           [--file-descriptor-set <path>] [--manifest-template <template>
                           --manifest-output <cargo_toml> --feature-deps <deps_file>] [--verbose]

Arguments:
    --names, -i             : File with whitespace separated dotted package names (// comments allowed)
    --output, -o            : Path of the lib.rs to write
    --file-descriptor-set   : File included unconditionally at the top of lib.rs
    --split                 : Generated files live outside the crate; prefix every include with --gen-dir
    --gen-dir               : Prefix used in split mode (default: ../gen/)
    --features              : Put a #[cfg(feature = "...")] guard in front of every package include
    --manifest-template     : Cargo.toml template containing {{ features }}
    --manifest-output       : Where to write the filled Cargo.toml
    --feature-deps          : Feature table, one `feature = [dep, ...]` entry per feature
    --verbose, -v           : Print debug output

Every flag can also be set through the environment (MODW_NAMES_FILE, MODW_OUTPUT_FILE,
MODW_FILE_DESCRIPTOR_SET, MODW_SPLIT, MODW_GEN_DIR, MODW_FEATURES, MODW_MANIFEST_TEMPLATE,
MODW_MANIFEST_OUTPUT, MODW_FEATURE_DEPS, MODW_VERBOSE); the environment wins.

Example:
    python mod_wrangler.py -i packages.txt -o src/lib.rs
    python mod_wrangler.py -i packages.txt -o src/lib.rs --split --features \\
        --manifest-template Cargo.toml.tpl --manifest-output Cargo.toml --feature-deps features.txt
"""

import argparse
import os
import sys
import tempfile
from typing import List, Optional

from errors import ModWranglerError
from lib_generator import DEFAULT_GEN_DIR, EmitterConfig, render
from manifest_filler import fill
from name_tree import NameTree
from names_parser import load_feature_table_file, load_names_file

TRUE_VALUES = ('1', 'true', 'yes', 'on')


def write_text_atomically(path: str, text: str) -> None:
    """Write through a temporary file in the target directory so readers never see a partial file."""
    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)
    temp_file = tempfile.NamedTemporaryFile(mode="w", encoding="utf-8", newline="\n", dir=directory,
                                            prefix=".modw_", suffix=".tmp", delete=False)
    try:
        with temp_file:
            temp_file.write(text)
        os.replace(temp_file.name, path)
    except BaseException:
        if os.path.exists(temp_file.name):
            os.unlink(temp_file.name)
        raise


class ModuleTreeGenerator:
    """
    Drives one generation run: load the package names, render lib.rs and optionally fill
    the Cargo.toml template.
    """

    def __init__(self, names_file: str, output_file: str, config: EmitterConfig, verbose: bool = False):
        """
        Args:
            names_file: File listing the dotted package names
            output_file: Path of the lib.rs to write
            config: Emission settings (split mode, feature guards, descriptor set include)
            verbose: Whether to print debug information (default: False)
        """
        self.names_file = names_file
        self.output_file = output_file
        self.config = config
        self.verbose = verbose
        self.tree = None

    def _debug(self, message: str) -> None:
        if self.verbose:
            print(f"[DEBUG] {message}")

    def load_names(self) -> bool:
        try:
            names = load_names_file(self.names_file)
        except (OSError, ModWranglerError) as exc:
            print(f"Error: cannot load package names from {self.names_file}: {exc}", file=sys.stderr)
            return False
        self.tree = NameTree.from_names(names)
        self._debug(f"Loaded {len(names)} package names from {self.names_file}")
        return True

    def generate_librs(self) -> bool:
        if self.tree is None:
            print("Error: No package names available. Load the names file first.", file=sys.stderr)
            return False
        self._debug(f"Rendering {self.output_file} with {self.config!r}")
        try:
            text = render(self.tree, self.config)
            write_text_atomically(self.output_file, text)
        except (OSError, ModWranglerError) as exc:
            print(f"Error generating {self.output_file}: {exc}", file=sys.stderr)
            return False
        self._debug(f"Wrote {len(text.splitlines())} lines to {self.output_file}")
        return True

    def generate_manifest(self, template_file: str, output_file: str, feature_deps_file: str) -> bool:
        try:
            entries = load_feature_table_file(feature_deps_file)
            self._debug(f"Loaded {len(entries)} features from {feature_deps_file}")
            text = fill(template_file, entries)
            write_text_atomically(output_file, text)
        except (OSError, ModWranglerError) as exc:
            print(f"Error generating manifest {output_file}: {exc}", file=sys.stderr)
            return False
        self._debug(f"Wrote manifest {output_file}")
        return True


def _env_flag(name: str, default: bool) -> bool:
    if name not in os.environ:
        return default
    return os.environ[name].strip().lower() in TRUE_VALUES


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments, then apply MODW_* environment overrides.

    Returns:
        argparse.Namespace: Parsed command line arguments
    """
    parser = argparse.ArgumentParser(
        description="Generate a Rust lib.rs module tree (and Cargo.toml features) for generated packages",
        formatter_class=argparse.RawTextHelpFormatter
    )

    parser.add_argument('--names', '-i', help='File with the dotted package names')
    parser.add_argument('--output', '-o', help='Path of the lib.rs to write')
    parser.add_argument('--file-descriptor-set', help='File included unconditionally at the top of lib.rs')
    parser.add_argument('--split', action='store_true', help='Prefix every include with --gen-dir')
    parser.add_argument('--gen-dir', default=DEFAULT_GEN_DIR, help=f'Prefix used in split mode (default: {DEFAULT_GEN_DIR})')
    parser.add_argument('--features', action='store_true', help='Guard every package include with a cargo feature')
    parser.add_argument('--manifest-template', help='Cargo.toml template containing {{ features }}')
    parser.add_argument('--manifest-output', help='Where to write the filled Cargo.toml')
    parser.add_argument('--feature-deps', help='Feature table file (feature = [dep, ...])')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable verbose output for debugging')

    args = parser.parse_args(argv)

    args.names = os.environ.get('MODW_NAMES_FILE', args.names)
    args.output = os.environ.get('MODW_OUTPUT_FILE', args.output)
    args.file_descriptor_set = os.environ.get('MODW_FILE_DESCRIPTOR_SET', args.file_descriptor_set)
    args.split = _env_flag('MODW_SPLIT', args.split)
    args.gen_dir = os.environ.get('MODW_GEN_DIR', args.gen_dir)
    args.features = _env_flag('MODW_FEATURES', args.features)
    args.manifest_template = os.environ.get('MODW_MANIFEST_TEMPLATE', args.manifest_template)
    args.manifest_output = os.environ.get('MODW_MANIFEST_OUTPUT', args.manifest_output)
    args.feature_deps = os.environ.get('MODW_FEATURE_DEPS', args.feature_deps)
    args.verbose = _env_flag('MODW_VERBOSE', args.verbose)

    if not args.names:
        parser.error("the following arguments are required: --names/-i")
    if not args.output:
        parser.error("the following arguments are required: --output/-o")

    manifest_args = [args.manifest_template, args.manifest_output, args.feature_deps]
    if any(manifest_args) and not all(manifest_args):
        parser.error("--manifest-template, --manifest-output and --feature-deps must be given together")

    return args


def main(argv: Optional[List[str]] = None) -> None:
    """
    Main entry point of the script.
    """
    args = parse_arguments(argv)

    config = EmitterConfig(
        file_descriptor_set_path=args.file_descriptor_set,
        split=args.split,
        gen_dir=args.gen_dir,
        features=args.features,
    )
    generator = ModuleTreeGenerator(args.names, args.output, config, args.verbose)

    if not generator.load_names():
        print("Module tree generation completed with errors.")
        sys.exit(1)

    success = generator.generate_librs()

    if args.manifest_template:
        if not generator.generate_manifest(args.manifest_template, args.manifest_output, args.feature_deps):
            success = False

    if success:
        print("Module tree generation completed successfully.")
    else:
        print("Module tree generation completed with errors.")
        sys.exit(1)


if __name__ == '__main__':
    main()
