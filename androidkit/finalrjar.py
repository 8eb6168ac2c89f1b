"""Build a final R.jar from R.txt files.

The package's R class refers to fields of a placeholder root R class. The
root class is compiled alongside it and then stripped from the jar, so it
can be replaced by the real one later.
"""

from __future__ import annotations

import argparse
import os
import shutil
import subprocess
import tempfile
import zipfile
from collections.abc import Iterable, Iterator, Mapping, Sequence
from contextlib import ExitStack
from dataclasses import dataclass
from typing import IO

RES_TYPES = (
    "anim",
    "animator",
    "array",
    "attr",
    "^attr-private",
    "bool",
    "color",
    "configVarying",
    "dimen",
    "drawable",
    "fraction",
    "font",
    "id",
    "integer",
    "interpolator",
    "layout",
    "menu",
    "mipmap",
    "navigation",
    "plurals",
    "raw",
    "string",
    "style",
    "styleable",
    "transition",
    "xml",
)

JAVA_RESERVED = frozenset(
    {
        "abstract", "assert", "boolean", "break", "byte", "case", "catch", "char",
        "class", "const", "continue", "default", "do", "double", "else", "enum",
        "extends", "false", "final", "finally", "float", "for", "goto", "if",
        "implements", "import", "instanceof", "int", "interface", "long", "native",
        "new", "null", "package", "private", "protected", "public", "return",
        "short", "static", "strictfp", "super", "switch", "synchronized", "this",
        "throw", "throws", "transient", "true", "try", "void", "volatile", "while",
    }
)


@dataclass(frozen=True)
class Resource:
    """One entry of an R.txt file."""

    id: str
    res_type: str
    var_type: str

    def __str__(self) -> str:
        return f"{{{self.var_type} {self.res_type} {self.id}}}"


def get_ids(rtxt_files: Iterable[IO[str]]) -> Iterator[Resource]:
    """Yield every resource declared in the R.txt streams, duplicates included.

    Lines look like "int anim abc_fade_in 0". Lines with fewer than three
    fields are skipped, as are ids containing '$', which aapt2 derives from
    real resources.
    """
    for rtxt in rtxt_files:
        for raw_line in rtxt:
            line = raw_line.rstrip("\n").rstrip("\r")
            parts = line.split(" ")
            if len(parts) < 3 or "$" in parts[2]:
                continue
            yield Resource(id=parts[2], res_type=parts[1], var_type=parts[0])


def group_res_by_type(resources: Iterable[Resource]) -> dict[str, list[Resource]]:
    """Group resources by type, keeping the first of each (type, id) pair."""
    seen: set[tuple[str, str]] = set()
    groups: dict[str, list[Resource]] = {}
    for res in resources:
        key = (res.res_type, res.id)
        if key in seen:
            continue
        seen.add(key)
        groups.setdefault(res.res_type, []).append(res)
    return groups


def write_r_javas(
    out_r_java: IO[str],
    out_root_r_java: IO[str],
    res_map: Mapping[str, Sequence[Resource]],
    pkg: str,
    root_package: str,
) -> None:
    """Write the package R.java and the placeholder root R.java.

    The root class uses 0 or null and non-final fields so that nothing is
    inlined into the package class.
    """
    r_java = [f"package {pkg};\n", "public class R {\n"]
    root_r_java = [f"package {root_package};\n", "public class R {\n"]

    for res_type in RES_TYPES:
        resources = res_map.get(res_type)
        if resources is None:
            continue
        r_java.append(f"  public static class {res_type} {{\n")
        root_r_java.append(f"  public static class {res_type} {{\n")
        root_id = f"{root_package}.R.{res_type}."
        for res in sorted(resources, key=lambda r: r.id):
            default = "null" if res.var_type == "int[]" else "0"
            r_java.append(
                f"    public static final {res.var_type} {res.id}={root_id}{res.id};\n"
            )
            root_r_java.append(f"    public static {res.var_type} {res.id}={default};\n")
        r_java.append("  }\n")
        root_r_java.append("  }\n")

    r_java.append("}\n")
    root_r_java.append("}\n")
    out_r_java.write("".join(r_java))
    out_root_r_java.write("".join(root_r_java))


def has_java_reserved_word(parts: Iterable[str]) -> bool:
    """Tell whether any package component is a reserved Java word."""
    return any(part in JAVA_RESERVED for part in parts)


def _prepare_output(output: str) -> None:
    if os.path.lexists(output):
        os.remove(output)
    parent = os.path.dirname(output)
    if parent:
        os.makedirs(parent, exist_ok=True)


def _write_empty_zip(output: str) -> None:
    _prepare_output(output)
    with zipfile.ZipFile(output, "w"):
        pass


def filter_zip(src: str, output: str, ignore_prefix: str) -> None:
    """Copy the entries of zip src to output, leaving out names starting with ignore_prefix."""
    _prepare_output(output)
    with zipfile.ZipFile(src) as zip_in, zipfile.ZipFile(output, "w") as zip_out:
        for info in zip_in.infolist():
            if info.filename.startswith(ignore_prefix):
                continue
            header = zipfile.ZipInfo(info.filename)
            header.compress_type = info.compress_type
            if info.filename.endswith("/"):
                zip_out.writestr(header, b"")
                continue
            with zip_in.open(info) as entry_in, zip_out.open(header, "w") as entry_out:
                shutil.copyfileobj(entry_in, entry_out)


def compile_r_jar(
    srcs: Iterable[str], rjar: str, jdk: str, jartool: str, target_label: str
) -> None:
    """Compile the sources into rjar with the java builder, raising RuntimeError on failure."""
    args = ["--javacopts", "-source", "8", "-target", "8", "-nowarn", "--", "--sources"]
    args.extend(srcs)
    args.extend(["--strict_java_deps", "ERROR", "--output", rjar])
    if target_label:
        args.extend(["--target_label", target_label])

    fd, control = tempfile.mkstemp(prefix="control")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as out:
            out.write("\n".join(args))
            out.flush()
            os.fsync(out.fileno())
        result = subprocess.run(
            [jdk, "-jar", jartool, f"@{control}"],
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            check=False,
        )
        if result.returncode != 0:
            output = result.stdout.decode("utf-8", errors="replace")
            raise RuntimeError(
                f"error compiling R.jar (using command: {output}): "
                f"exit status {result.returncode}"
            )
    finally:
        os.remove(control)


def _create_r_java(src_dir: str, pkg_parts: Sequence[str]) -> str:
    pkg_dir = os.path.join(src_dir, *pkg_parts)
    os.makedirs(pkg_dir, exist_ok=True)
    return os.path.join(pkg_dir, "R.java")


def build_final_r_jar(
    pkg: str,
    rtxts: str,
    output_r_jar: str,
    root_package: str,
    jdk: str,
    jartool: str,
    target_label: str,
) -> None:
    """Build output_r_jar for pkg from the comma separated R.txt paths in rtxts.

    A package containing a reserved Java word gets an empty jar.
    """
    pkg_parts = pkg.split(".")
    if has_java_reserved_word(pkg_parts):
        _write_empty_zip(output_r_jar)
        return

    with ExitStack() as stack:
        files = [
            stack.enter_context(open(path, encoding="utf-8"))
            for path in rtxts.split(",")
        ]
        res_map = group_res_by_type(get_ids(files))

    root_parts = root_package.split(".")
    with tempfile.TemporaryDirectory(prefix="rjar") as src_dir:
        r_java = _create_r_java(src_dir, pkg_parts)
        root_r_java = _create_r_java(src_dir, root_parts)
        with open(r_java, "w", encoding="utf-8") as out, open(
            root_r_java, "w", encoding="utf-8"
        ) as root_out:
            write_r_javas(out, root_out, res_map, pkg, root_package)

        full_r_jar = os.path.join(src_dir, "R.jar")
        compile_r_jar([r_java, root_r_java], full_r_jar, jdk, jartool, target_label)
        filter_zip(full_r_jar, output_r_jar, "/".join(root_parts))


def main(argv: list[str] | None = None) -> None:
    """Command line entry point."""
    parser = argparse.ArgumentParser(
        prog="finalrjar",
        description="finalrjar creates a platform conform R.jar from R.txt files",
    )
    parser.add_argument("--package", default="", help="Package for the R.jar")
    parser.add_argument("--r_txts", default="", help="Comma separated list of R.txt files")
    parser.add_argument("--out_rjar", default="", help="Output R.jar path")
    parser.add_argument("--root_pkg", default="mi.rjava", help="Package to use for root R.java")
    parser.add_argument("--jdk", default="", help="Jdk path")
    parser.add_argument("--jartool", default="", help="Jartool path")
    parser.add_argument("--target_label", default="", help="The target label")
    args = parser.parse_args(argv)
    try:
        build_final_r_jar(
            args.package,
            args.r_txts,
            args.out_rjar,
            args.root_pkg,
            args.jdk,
            args.jartool,
            args.target_label,
        )
    except (OSError, RuntimeError, zipfile.BadZipFile) as exc:
        raise SystemExit(f"error creating final R.jar: {exc}") from exc