"""Collect native libraries into the zip used by the shell apk."""

from __future__ import annotations

import argparse
import os
import posixpath
import shutil
import tempfile
import zipfile
from collections.abc import Iterable

_ARCH_ALIASES = {"armv7a": "armeabi-v7a"}


def extract_libs(lib_zip: str | os.PathLike, dst_dir: str | os.PathLike) -> list[str]:
    """Unzip lib_zip into dst_dir and return its libraries as "arch:path" entries.

    The architecture of each library is the name of the directory holding it
    inside the zip.
    """
    with zipfile.ZipFile(lib_zip) as archive:
        libs = [
            f"{posixpath.basename(posixpath.dirname(info.filename))}:"
            f"{os.path.join(dst_dir, info.filename)}"
            for info in archive.infolist()
            if not info.is_dir()
        ]
        archive.extractall(dst_dir)
    return libs


def copy_native_libs(native_libs: Iterable[str], directory: str | os.PathLike) -> list[str]:
    """Copy each "arch:path" library to directory/lib/<arch>/ and return the new paths.

    Raises ValueError for an entry without an architecture.
    """
    paths = []
    for entry in native_libs:
        arch, sep, native_lib = entry.partition(":")
        if not sep:
            raise ValueError("error parsing native lib")
        arch = _ARCH_ALIASES.get(arch, arch)
        lib_out_dir = os.path.join(directory, "lib", arch)
        os.makedirs(lib_out_dir, exist_ok=True)
        out_path = os.path.join(lib_out_dir, os.path.basename(native_lib))
        shutil.copyfile(native_lib, out_path)
        paths.append(out_path)
    return paths


def create_native_lib_zip(native_libs: Iterable[str], out: str | os.PathLike) -> None:
    """Write a zip holding every "arch:path" library as lib/<arch>/<name>, sorted by path."""
    with tempfile.TemporaryDirectory(prefix="nativelib") as native_dir:
        paths = sorted(copy_native_libs(native_libs, native_dir))
        with zipfile.ZipFile(out, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            for path in paths:
                name = os.path.relpath(path, native_dir).replace(os.sep, "/")
                archive.write(path, name)


def _split_list(values: Iterable[str]) -> list[str]:
    return [item for value in values for item in value.split(",") if item]


def main(argv: list[str] | None = None) -> None:
    """Command line entry point."""
    parser = argparse.ArgumentParser(
        prog="nativelib", description="Nativelib creates the native lib zip."
    )
    parser.add_argument("--lib", action="append", default=[], help="Path to native lib.")
    parser.add_argument(
        "--native_libs_zip", action="append", default=[], help="Zip(s) containing native libs."
    )
    parser.add_argument("--out", default="", help="Native libraries files.")
    args = parser.parse_args(argv)

    native_libs = _split_list(args.lib)
    lib_zips = _split_list(args.native_libs_zip)
    try:
        if lib_zips:
            dst_dir = tempfile.mkdtemp(prefix="ziplibs")
            for lib_zip in lib_zips:
                native_libs.extend(extract_libs(lib_zip, dst_dir))
        create_native_lib_zip(native_libs, args.out)
    except (OSError, ValueError, zipfile.BadZipFile) as exc:
        raise SystemExit(f"Error creating native lib zip: {exc}") from exc