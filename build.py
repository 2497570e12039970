#!/usr/bin/env python3
"""
Build script for iTerm2 Tab Width.

Concatenates src/iterm2_tab_width/*.py modules into a single tab-width.py
file that's compatible with iTerm2 AutoLaunch (which requires a single .py file).

Usage:
    python build.py           # Build tab-width.py
    python build.py --check   # Verify output matches (for CI)

Module order matters for dependencies:
1. _header.py         - PEP 723 metadata, docstring, imports
2. logging_config.py  - Loguru JSONL logging
3. errors.py          - Error/Result types
4. config_loader.py   - LayoutConfig and TOML loading
5. tab_model.py       - Tab and DisplayName records
6. layout_engine.py   - Width allocation, padding and truncation
7. label_registry.py  - True label recovery
8. orchestrator.py    - Recompute entry points
9. tab_sync.py        - iTerm2 tab reading/writing
10. main.py           - Entry point (monitors, iterm2.run_forever)
"""

import re
import sys
from pathlib import Path

# Module order (dependencies flow downward)
MODULE_ORDER = [
    "_header.py",
    "logging_config.py",
    "errors.py",
    "config_loader.py",
    "tab_model.py",
    "layout_engine.py",
    "label_registry.py",
    "orchestrator.py",
    "tab_sync.py",
    "main.py",
]

SRC_DIR = Path(__file__).parent / "src" / "iterm2_tab_width"
OUTPUT_FILE = Path(__file__).parent / "tab-width.py"

IMPORT_PATTERN = re.compile(r"^import (\S+)$|^from (\S+) import (.+)$")


def header_imports(header: str) -> dict[str, set[str]]:
    """
    Map each module imported in _header.py to the names it provides.

    Indented imports count too: the header imports its third-party
    packages inside try blocks.

    `import x` maps x to {"*"}; `from x import a, b` maps x to {"a", "b"}.
    """
    provided: dict[str, set[str]] = {}
    for line in header.split("\n"):
        match = IMPORT_PATTERN.match(line.strip())
        if not match:
            continue
        if match.group(1):
            provided.setdefault(match.group(1), set()).add("*")
        else:
            names = {name.strip() for name in match.group(3).split(",")}
            provided.setdefault(match.group(2), set()).update(names)
    return provided


def is_provided(line: str, provided: dict[str, set[str]]) -> bool:
    """True if every name a top-level import line binds comes from _header.py."""
    match = IMPORT_PATTERN.match(line)
    if not match:
        return False
    if match.group(1):
        return "*" in provided.get(match.group(1), set())
    names = {name.strip() for name in match.group(3).split(",")}
    return names <= provided.get(match.group(2), set())


def strip_module_imports(content: str, provided: dict[str, set[str]]) -> str:
    """Remove package-relative imports and imports already in _header.py."""
    lines = content.split("\n")
    result = []

    for line in lines:
        # Only top-level imports; indented ones belong to function bodies
        if line.startswith((" ", "\t")):
            result.append(line)
            continue
        stripped = line.strip()
        if stripped.startswith("from ."):
            continue
        if is_provided(stripped, provided):
            continue
        result.append(line)

    return "\n".join(result)


def strip_module_docstring(content: str) -> str:
    """Remove module-level docstring (we use the one from _header.py)."""
    pattern = r'^((?:#[^\n]*\n)*)\s*(?:\'\'\'[\s\S]*?\'\'\'|"""[\s\S]*?""")\s*\n'
    return re.sub(pattern, r'\1', content)


def process_module(path: Path, provided: dict[str, set[str]], is_header: bool = False) -> str:
    """Process a single module file for concatenation."""
    content = path.read_text()

    if is_header:
        # Header is used as-is (contains PEP 723, imports, etc.)
        return content

    # Remove shebang if present (only header should have it)
    if content.startswith("#!"):
        content = "\n".join(content.split("\n")[1:])

    content = strip_module_imports(content, provided)
    content = strip_module_docstring(content)

    # Collapse the blank lines left behind by removed imports
    content = re.sub(r"\n{3,}", "\n\n\n", content)

    return content.strip()


def build() -> str:
    """Build the concatenated output."""
    parts = []
    provided = header_imports((SRC_DIR / "_header.py").read_text())

    for module_name in MODULE_ORDER:
        module_path = SRC_DIR / module_name
        if not module_path.exists():
            print(f"ERROR: Missing module: {module_path}", file=sys.stderr)
            sys.exit(1)

        is_header = module_name == "_header.py"
        content = process_module(module_path, provided, is_header=is_header)

        if content:
            # Add section separator for readability
            if not is_header:
                separator = f"\n\n# {'=' * 77}\n# Module: {module_name}\n# {'=' * 77}\n\n"
                parts.append(separator)
            parts.append(content)

    return "".join(parts) + "\n"


def main():
    check_mode = "--check" in sys.argv

    if not SRC_DIR.exists():
        print(f"ERROR: src directory not found: {SRC_DIR}", file=sys.stderr)
        sys.exit(1)

    output = build()

    if check_mode:
        if not OUTPUT_FILE.exists():
            print(f"ERROR: Output file not found: {OUTPUT_FILE}", file=sys.stderr)
            sys.exit(1)

        existing = OUTPUT_FILE.read_text()
        if existing != output:
            print("ERROR: Built output differs from existing file.", file=sys.stderr)
            print("Run 'python build.py' to regenerate.", file=sys.stderr)
            sys.exit(1)

        print("OK: Output matches.")
        sys.exit(0)

    OUTPUT_FILE.write_text(output)

    # Verify syntax
    import py_compile
    try:
        py_compile.compile(str(OUTPUT_FILE), doraise=True)
        print(f"Built: {OUTPUT_FILE} ({len(output)} bytes, syntax OK)")
    except py_compile.PyCompileError as e:
        print(f"ERROR: Syntax error in output: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
