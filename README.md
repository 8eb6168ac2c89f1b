# androidkit

Small command line tools, and the Python functions behind them, for steps
of an Android build: unpacking AARs, building a final `R.jar` from `R.txt`
files, and collecting native libraries into a zip.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Commands

Every command prints its options with `--help`.

### `ak-extractaar`

Extracts the `AndroidManifest.xml`, the `res/` files and the `assets/` files
of an AAR.

```
ak-extractaar --aar lib.aar --label //app:lib \
    --out_manifest out/AndroidManifest.xml \
    --out_res_dir out/res --out_assets_dir out/assets \
    --has_res 1 --has_assets -1
```

`--has_res` and `--has_assets` take `1` (true), `-1` (false) or `0`
(unset, the default; other numbers also count as unset). When set, they
are checked against what the AAR holds. The AAR must hold exactly one
manifest. If any check fails, nothing is copied and the command exits with
a message listing the problems and, where a setting is wrong, a
`buildozer` command that fixes it, for example:

```
error(s) found while processing aar '//app:lib':
	- has_res attribute is False, but files were found
Use the following command to fix the target:
buildozer 'set has_res True' //app:lib
```

An empty resource directory gets `res/values/empty.xml` containing
`<resources/>`, and an empty assets directory gets
`assets/empty_asset_generated_by_bazel~`, so that neither output is empty.

### `ak-finalrjar`

Builds an `R.jar` from comma separated `R.txt` files.

```
ak-finalrjar --package com.example.app --r_txts a/R.txt,b/R.txt \
    --out_rjar out/R.jar --jdk /path/to/java --jartool /path/to/builder.jar
```

Options: `--package`, `--r_txts`, `--out_rjar`, `--root_pkg` (default
`mi.rjava`), `--jdk`, `--jartool`, `--target_label`.

The generated `R` class of the package refers to fields of a placeholder
`R` class in the root package. Both are compiled by running
`<jdk> -jar <jartool> @<params file>`, and the classes of the root package
are then removed from the jar. Duplicate resources (same type and name) are
kept once, and ids containing `$` are skipped. If any component of the
package name is a reserved Java word, an empty jar is written instead.

### `ak-nativelib`

Collects native libraries into a zip with entries `lib/<arch>/<name>`.

```
ak-nativelib --lib x86:libs/libfoo.so --lib armv7a:libs/arm/libfoo.so \
    --native_libs_zip more_libs.zip --out native_libs.zip
```

`--lib` takes `arch:path` entries; `armv7a` is written as `armeabi-v7a`.
`--native_libs_zip` takes zips whose libraries are stored under a
directory named after their architecture. Both options may be repeated or
given comma separated values.

## Library use

The same work is available from Python:

- `androidkit.extractaar`: `extract`, `extract_aar`, `group_aar_files`,
  `create_if_empty`, and the `FileType` enum.
- `androidkit.aar_validator`: `ManifestValidator`, `ResourceValidator`,
  `AarFile`, `ToCopy` and `Tristate`.
- `androidkit.buildozer`: the `BuildozerError` exception and
  `merge_buildozer_errors`.
- `androidkit.finalrjar`: `build_final_r_jar`, `get_ids`,
  `group_res_by_type`, `write_r_javas`, `has_java_reserved_word`,
  `filter_zip`, `compile_r_jar` and the `Resource` dataclass.
- `androidkit.nativelib`: `create_native_lib_zip`, `copy_native_libs` and
  `extract_libs`.

```python
from androidkit.finalrjar import get_ids, group_res_by_type, write_r_javas
import io

rtxt = io.StringIO("int string app_name 0\nint[] styleable Theme 0\n")
r_java, root_r_java = io.StringIO(), io.StringIO()
write_r_javas(r_java, root_r_java, group_res_by_type(get_ids([rtxt])),
              "com.example.app", "mi.rjava")
print(r_java.getvalue())
```

## What this package does not do

It does not read, patch, generate or compile `AndroidManifest.xml` files
beyond copying the one found in an AAR, it does not write dex files, and
it does not run `aapt2`. Building an `R.jar` needs a JDK and a Java
builder jar supplied by the caller.