#!/usr/bin/env python3
"""
Build script for the sales API Lambda function.

Packages the entry point, the sales_api package and the runtime dependencies
declared in pyproject.toml into build/api.zip.
"""
import os
import shutil
import subprocess
import sys
import tomllib
import zipfile
from pathlib import Path

FUNCTION_NAME = "api"
PACKAGE_NAME = "sales_api"
# Lambda runs on Linux x86_64; binary wheels (psycopg2, pydantic-core) must match it
PLATFORM = "manylinux2014_x86_64"


def runtime_dependencies(project_root: Path) -> list:
    with open(project_root / "pyproject.toml", "rb") as f:
        return tomllib.load(f)["project"]["dependencies"]


def main():
    """Main build function"""
    project_root = Path(__file__).parent.parent
    src_dir = project_root / "src"
    build_dir = project_root / "build"

    # Create build directory
    build_dir.mkdir(exist_ok=True)

    zip_path = build_dir / f"{FUNCTION_NAME}.zip"
    temp_dir = build_dir / f"temp_{FUNCTION_NAME}"
    if temp_dir.exists():
        shutil.rmtree(temp_dir)
    temp_dir.mkdir()

    print(f"Building {FUNCTION_NAME}...")

    # Entry point at the archive root, service package beside it
    shutil.copy2(src_dir / FUNCTION_NAME / "lambda_function.py", temp_dir / "lambda_function.py")
    shutil.copytree(
        src_dir / PACKAGE_NAME,
        temp_dir / PACKAGE_NAME,
        ignore=shutil.ignore_patterns("__pycache__", "*.pyc"),
    )

    dependencies = runtime_dependencies(project_root)
    print(f"Installing dependencies: {dependencies}")
    subprocess.run([
        sys.executable, "-m", "pip", "install",
        *dependencies,
        "-t", str(temp_dir),
        "--platform", PLATFORM,
        "--only-binary=:all:",
        "--implementation", "cp",
    ], check=True)

    # Create zip archive
    print(f"Creating {FUNCTION_NAME}.zip...")
    with zipfile.ZipFile(zip_path, 'w', zipfile.ZIP_DEFLATED) as zipf:
        for root, _, files in os.walk(temp_dir):
            for file in files:
                file_path = Path(root) / file
                arcname = file_path.relative_to(temp_dir)
                zipf.write(file_path, arcname)

    # Clean up temporary directory
    shutil.rmtree(temp_dir)

    print(f"{FUNCTION_NAME}.zip created ({zip_path.stat().st_size} bytes)")
    print("Build complete!")


if __name__ == "__main__":
    main()
