#!/usr/bin/env python3
"""Block runtime-support imports inside API create_ factory functions."""

from __future__ import annotations

import argparse
import ast
from pathlib import Path


def _is_runtime_import(module: str) -> bool:
    return module == "stepclock.runtime" or module.startswith("stepclock.runtime.")


def check_file(path: Path) -> list[str]:
    tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
    violations: list[str] = []

    for node in tree.body:
        if not isinstance(node, ast.FunctionDef) or not node.name.startswith("create_"):
            continue
        for inner in ast.walk(node):
            if isinstance(inner, ast.Import):
                for alias in inner.names:
                    if _is_runtime_import(alias.name):
                        violations.append(
                            f"{path}:{inner.lineno} function {node.name} imports {alias.name}"
                        )
            elif isinstance(inner, ast.ImportFrom):
                module = str(inner.module or "")
                if _is_runtime_import(module):
                    violations.append(
                        f"{path}:{inner.lineno} function {node.name} imports from {module}"
                    )
    return violations


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Check API factory imports.")
    parser.add_argument("--root", default="stepclock/api")
    args = parser.parse_args(argv)

    violations: list[str] = []
    for path in sorted(Path(args.root).rglob("*.py")):
        violations.extend(check_file(path))

    if violations:
        print("API runtime factory violations:")
        for line in violations:
            print(f"  {line}")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
