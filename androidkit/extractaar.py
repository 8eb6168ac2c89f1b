"""Extract the manifest, resources and assets from an aar."""

from __future__ import annotations

import argparse
import os
import shutil
import tempfile
import zipfile
from collections.abc import Iterable
from enum import Enum, auto

from androidkit.aar_validator import (
    AarFile,
    ManifestValidator,
    ResourceValidator,
    ToCopy,
    Tristate,
)
from androidkit.buildozer import BuildozerError, merge_buildozer_errors


class FileType(Enum):
    """The kinds of aar content that are extracted."""

    MANIFEST = auto()
    RES = auto()
    ASSETS = auto()


def group_aar_files(files: Iterable[AarFile]) -> dict[FileType, list[AarFile]]:
    """Group aar files by kind; files of other kinds are dropped."""
    groups: dict[FileType, list[AarFile]] = {file_type: [] for file_type in FileType}
    for f in files:
        if f.rel_path == "AndroidManifest.xml":
            groups[FileType.MANIFEST].append(f)
        elif f.rel_path.startswith("res/"):
            groups[FileType.RES].append(f)
        elif f.rel_path.startswith("assets/"):
            groups[FileType.ASSETS].append(f)
    return groups


def extract_aar(aar: str | os.PathLike, dest: str | os.PathLike) -> list[AarFile]:
    """Extract every regular file of the aar under dest and list them."""
    files = []
    with zipfile.ZipFile(aar) as archive:
        for info in archive.infolist():
            if info.is_dir():
                continue
            extracted = os.path.join(dest, info.filename)
            os.makedirs(os.path.dirname(extracted), exist_ok=True)
            with archive.open(info) as src, open(extracted, "wb") as out:
                shutil.copyfileobj(src, out)
            mode = (info.external_attr >> 16) & 0o777
            if mode:
                os.chmod(extracted, mode)
            files.append(AarFile(path=extracted, rel_path=info.filename))
    return files


def _copy_file(src: str, dest: str) -> None:
    parent = os.path.dirname(dest)
    if parent:
        os.makedirs(parent, exist_ok=True)
    shutil.copyfile(src, dest)


def _dir_is_empty(directory: str) -> bool:
    try:
        with os.scandir(directory) as entries:
            return next(entries, None) is None
    except FileNotFoundError:
        return True


def create_if_empty(directory: str, filename: str, content: str) -> None:
    """Write content to directory/filename if directory is empty or missing."""
    if not _dir_is_empty(directory):
        return
    dest = os.path.join(directory, filename)
    os.makedirs(os.path.dirname(dest), exist_ok=True)
    with open(dest, "w", encoding="utf-8") as out:
        out.write(content)


def extract(
    aar: str,
    label: str,
    output_manifest: str,
    output_res_dir: str,
    output_assets_dir: str,
    has_res: int,
    has_assets: int,
) -> None:
    """Extract an aar to the outputs, raising ValueError if it does not match the rule."""
    validators = {
        FileType.MANIFEST: ManifestValidator(dest=output_manifest),
        FileType.RES: ResourceValidator(
            dest=output_res_dir, rule_attr="has_res", has_res=Tristate(has_res)
        ),
        FileType.ASSETS: ResourceValidator(
            dest=output_assets_dir, rule_attr="has_assets", has_res=Tristate(has_assets)
        ),
    }

    with tempfile.TemporaryDirectory(prefix="extractaar_") as tmp_dir:
        files = extract_aar(aar, tmp_dir)

        to_copy: list[ToCopy] = []
        errors: list[BuildozerError] = []
        for file_type, group in group_aar_files(files).items():
            try:
                to_copy.extend(validators[file_type].validate(group))
            except BuildozerError as err:
                errors.append(err)

        if errors:
            raise ValueError(merge_buildozer_errors(label, errors))

        for item in to_copy:
            _copy_file(item.src, item.dest)

    # An output tree must hold at least one file for the build to accept it.
    create_if_empty(output_res_dir, "res/values/empty.xml", "<resources/>")
    # aapt takes this name for a swap file and skips it silently.
    create_if_empty(output_assets_dir, "assets/empty_asset_generated_by_bazel~", "")


def main(argv: list[str] | None = None) -> None:
    """Command line entry point."""
    parser = argparse.ArgumentParser(prog="extractaar", description="Extracts files from an AAR")
    parser.add_argument("--aar", default="", help="Path to the aar")
    parser.add_argument("--label", default="", help="Target's label")
    parser.add_argument("--out_manifest", default="", help="Output manifest")
    parser.add_argument("--out_res_dir", default="", help="Output resources directory")
    parser.add_argument("--out_assets_dir", default="", help="Output assets directory")
    parser.add_argument("--has_res", type=int, default=0, help="Whether the aar has resources")
    parser.add_argument("--has_assets", type=int, default=0, help="Whether the aar has assets")
    args = parser.parse_args(argv)
    try:
        extract(
            args.aar,
            args.label,
            args.out_manifest,
            args.out_res_dir,
            args.out_assets_dir,
            args.has_res,
            args.has_assets,
        )
    except (OSError, ValueError, zipfile.BadZipFile) as exc:
        raise SystemExit(str(exc)) from exc