import io
import os
import stat
import sys
import zipfile

import pytest

from androidkit.finalrjar import (
    Resource,
    build_final_r_jar,
    compile_r_jar,
    filter_zip,
    get_ids,
    group_res_by_type,
    has_java_reserved_word,
    main,
    write_r_javas,
)


def R(id_, res_type, var_type):
    return Resource(id=id_, res_type=res_type, var_type=var_type)


@pytest.mark.parametrize(
    "contents, expected",
    [
        (
            [
                "int anim abc_fade_in 0\n"
                "int anim abc_fade_out 0\n"
                "int attr actionBarDivider 0\n"
                "int bool abc_action_bar_embed_tabs 0\n"
                "int color abc_background_cache_hint_selector_material_dark 0\n"
                "int[] color abc_background_cache_hint_selector_material_light 0\n"
                "int color abc_btn_colored_borderless_text_material 0\n"
                "int dimen tooltip_y_offset_non_touch 0\n"
                "int dimen $avd_hide_password__0 0\n"
                "int[] dimen tooltip_y_offset_touch 0\n"
                "int drawable abc_ab_share_pack_mtrl_alpha 0"
            ],
            [
                R("abc_ab_share_pack_mtrl_alpha", "drawable", "int"),
                R("abc_action_bar_embed_tabs", "bool", "int"),
                R("abc_background_cache_hint_selector_material_dark", "color", "int"),
                R("abc_background_cache_hint_selector_material_light", "color", "int[]"),
                R("abc_btn_colored_borderless_text_material", "color", "int"),
                R("abc_fade_in", "anim", "int"),
                R("abc_fade_out", "anim", "int"),
                R("actionBarDivider", "attr", "int"),
                R("tooltip_y_offset_non_touch", "dimen", "int"),
                R("tooltip_y_offset_touch", "dimen", "int[]"),
            ],
        ),
        (
            [
                "int styleable toolbar_logo 0\nint[] style widget_appcompat_dark 0",
                "int layout custom_dialog 0\nint interpolator btn_checkbox 0",
                "int id view_tree 0\nint integer cancel_button_image_alpha 0",
            ],
            [
                R("btn_checkbox", "interpolator", "int"),
                R("cancel_button_image_alpha", "integer", "int"),
                R("custom_dialog", "layout", "int"),
                R("toolbar_logo", "styleable", "int"),
                R("view_tree", "id", "int"),
                R("widget_appcompat_dark", "style", "int[]"),
            ],
        ),
    ],
)
def test_get_ids(contents, expected):
    received = list(get_ids([io.StringIO(c) for c in contents]))
    assert sorted(received, key=lambda r: r.id) == expected


def test_get_ids_skips_short_lines_and_strips_crlf():
    received = list(get_ids([io.StringIO("garbage\r\nint id a 0\r\nint id\n")]))
    assert received == [R("a", "id", "int")]


def test_resource_str():
    assert str(R("x", "id", "int")) == "{int id x}"


@pytest.mark.parametrize(
    "resources, expected",
    [
        (
            [
                R("btn_checkbox", "interpolator", "int"),
                R("cancel_button_image_alpha", "integer", "int"),
                R("custom_dialog", "id", "int"),
                R("toolbar_logo", "interpolator", "int"),
                R("view_tree", "id", "int"),
                R("widget_appcompat_dark", "layout", "int[]"),
            ],
            {
                "interpolator": [
                    R("btn_checkbox", "interpolator", "int"),
                    R("toolbar_logo", "interpolator", "int"),
                ],
                "integer": [R("cancel_button_image_alpha", "integer", "int")],
                "id": [R("custom_dialog", "id", "int"), R("view_tree", "id", "int")],
                "layout": [R("widget_appcompat_dark", "layout", "int[]")],
            },
        ),
        (
            [
                R("btn_checkbox", "interpolator", "int"),
                R("btn_checkbox", "interpolator", "int"),
                R("cancel_button_image_alpha", "integer", "int"),
                R("custom_dialog", "id", "int"),
                R("toolbar_logo", "interpolator", "int"),
                R("toolbar_logo", "attr", "int"),
                R("view_tree", "id", "int"),
                R("cancel_button_image_alpha", "integer", "int"),
                R("widget_appcompat_dark", "layout", "int[]"),
            ],
            {
                "attr": [R("toolbar_logo", "attr", "int")],
                "interpolator": [
                    R("btn_checkbox", "interpolator", "int"),
                    R("toolbar_logo", "interpolator", "int"),
                ],
                "integer": [R("cancel_button_image_alpha", "integer", "int")],
                "id": [R("custom_dialog", "id", "int"), R("view_tree", "id", "int")],
                "layout": [R("widget_appcompat_dark", "layout", "int[]")],
            },
        ),
    ],
)
def test_group_res_by_type(resources, expected):
    assert group_res_by_type(resources) == expected


SIMPLE_R_JAVA = """package com.google.android.apps.sample;
public class R {
  public static class id {
    public static final int custom_dialog=mi.rjava.R.id.custom_dialog;
    public static final int view_tree=mi.rjava.R.id.view_tree;
  }
  public static class integer {
    public static final int cancel_button_image_alpha=mi.rjava.R.integer.cancel_button_image_alpha;
  }
  public static class interpolator {
    public static final int btn_checkbox=mi.rjava.R.interpolator.btn_checkbox;
    public static final int toolbar_logo=mi.rjava.R.interpolator.toolbar_logo;
  }
  public static class layout {
    public static final int[] widget_appcompat_dark=mi.rjava.R.layout.widget_appcompat_dark;
  }
}
"""

SIMPLE_ROOT_R_JAVA = """package mi.rjava;
public class R {
  public static class id {
    public static int custom_dialog=0;
    public static int view_tree=0;
  }
  public static class integer {
    public static int cancel_button_image_alpha=0;
  }
  public static class interpolator {
    public static int btn_checkbox=0;
    public static int toolbar_logo=0;
  }
  public static class layout {
    public static int[] widget_appcompat_dark=null;
  }
}
"""

EMPTY_R_JAVA = """package com.google.android.apps.empty;
public class R {
  public static class integer {
    public static final int cancel_button_image_alpha=mi.rjava.R.integer.cancel_button_image_alpha;
  }
  public static class interpolator {
    public static final int btn_checkbox=mi.rjava.R.interpolator.btn_checkbox;
    public static final int toolbar_logo=mi.rjava.R.interpolator.toolbar_logo;
  }
  public static class layout {
    public static final int[] widget_appcompat_dark=mi.rjava.R.layout.widget_appcompat_dark;
  }
}
"""

EMPTY_ROOT_R_JAVA = """package mi.rjava;
public class R {
  public static class integer {
    public static int cancel_button_image_alpha=0;
  }
  public static class interpolator {
    public static int btn_checkbox=0;
    public static int toolbar_logo=0;
  }
  public static class layout {
    public static int[] widget_appcompat_dark=null;
  }
}
"""


@pytest.mark.parametrize(
    "res_map, pkg, expected_r, expected_root",
    [
        (
            {
                "interpolator": [
                    R("btn_checkbox", "interpolator", "int"),
                    R("toolbar_logo", "interpolator", "int"),
                ],
                "integer": [R("cancel_button_image_alpha", "integer", "int")],
                "id": [R("view_tree", "id", "int"), R("custom_dialog", "id", "int")],
                "layout": [R("widget_appcompat_dark", "layout", "int[]")],
            },
            "com.google.android.apps.sample",
            SIMPLE_R_JAVA,
            SIMPLE_ROOT_R_JAVA,
        ),
        (
            {
                "interpolator": [
                    R("toolbar_logo", "interpolator", "int"),
                    R("btn_checkbox", "interpolator", "int"),
                ],
                "integer": [R("cancel_button_image_alpha", "integer", "int")],
                "layout": [R("widget_appcompat_dark", "layout", "int[]")],
            },
            "com.google.android.apps.empty",
            EMPTY_R_JAVA,
            EMPTY_ROOT_R_JAVA,
        ),
    ],
)
def test_write_r_javas(res_map, pkg, expected_r, expected_root):
    r_java, root_r_java = io.StringIO(), io.StringIO()
    write_r_javas(r_java, root_r_java, res_map, pkg, "mi.rjava")
    assert r_java.getvalue() == expected_r
    assert root_r_java.getvalue() == expected_root


@pytest.mark.parametrize(
    "pkg, expected",
    [
        ("com.google.android.apps.sampleapp.lib", False),
        ("com.google.android.static.sampleapp.lib", True),
    ],
)
def test_has_java_reserved_word(pkg, expected):
    assert has_java_reserved_word(pkg.split(".")) is expected


def test_filter_zip_drops_prefixed_entries(tmp_path):
    src = tmp_path / "in.jar"
    with zipfile.ZipFile(src, "w") as zf:
        zf.writestr("com/example/R.class", b"keep")
        zf.writestr("com/example/", b"")
        zf.writestr("mi/rjava/R.class", b"drop")
    out = tmp_path / "sub" / "out.jar"
    filter_zip(str(src), str(out), "mi/rjava")
    with zipfile.ZipFile(out) as zf:
        assert sorted(zf.namelist()) == ["com/example/", "com/example/R.class"]
        assert zf.read("com/example/R.class") == b"keep"


def test_build_with_reserved_package_writes_empty_jar(tmp_path):
    out = tmp_path / "out" / "R.jar"
    build_final_r_jar("com.static.app", "unused.txt", str(out), "mi.rjava", "", "", "")
    with zipfile.ZipFile(out) as zf:
        assert zf.namelist() == []


def test_compile_r_jar_failure_raises(tmp_path):
    with pytest.raises(RuntimeError, match="error compiling R.jar"):
        compile_r_jar(["A.java"], str(tmp_path / "R.jar"), sys.executable, "tool.jar", "")


FAKE_JDK = """#!{python}
import sys, zipfile
control = sys.argv[3][1:]
lines = open(control).read().split("\\n")
output = lines[lines.index("--output") + 1]
with open(sys.argv[0] + ".args", "w") as f:
    f.write("\\n".join(lines))
with zipfile.ZipFile(output, "w") as zf:
    zf.writestr("com/example/R.class", b"pkg")
    zf.writestr("com/example/R$id.class", b"pkg-id")
    zf.writestr("mi/rjava/R.class", b"root")
"""


def test_build_final_r_jar_end_to_end(tmp_path):
    jdk = tmp_path / "fakejdk"
    jdk.write_text(FAKE_JDK.format(python=sys.executable))
    jdk.chmod(jdk.stat().st_mode | stat.S_IXUSR)
    rtxt = tmp_path / "R.txt"
    rtxt.write_text("int id view 0\n")
    out = tmp_path / "out" / "R.jar"

    build_final_r_jar(
        "com.example", str(rtxt), str(out), "mi.rjava", str(jdk), "tool.jar", "//a:b"
    )

    with zipfile.ZipFile(out) as zf:
        assert sorted(zf.namelist()) == ["com/example/R$id.class", "com/example/R.class"]
    args = (tmp_path / "fakejdk.args").read_text().split("\n")
    assert args[:7] == ["--javacopts", "-source", "8", "-target", "8", "-nowarn", "--"]
    assert args[-2:] == ["--target_label", "//a:b"]
    assert "ERROR" in args


def test_main_reports_missing_rtxt(tmp_path):
    with pytest.raises(SystemExit, match="error creating final R.jar"):
        main(
            [
                "--package",
                "com.example",
                "--r_txts",
                os.path.join(str(tmp_path), "missing.txt"),
                "--out_rjar",
                str(tmp_path / "R.jar"),
            ]
        )