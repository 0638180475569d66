import os

import pytest

from takein.analyze.analyzer import (
    analyze,
    count_files,
    extract_paths,
    iter_files,
    parse_envs,
    preview_destination,
)
from takein.analyze.destination import resolve
from takein.errors import FilesystemError, TakeinError
from takein.schemas import FILE_COUNT_CAPPED, IntakeConfig

TODAY = "261018"


def _lines(*paths):
    return "\n".join(str(p) for p in paths)


def test_extract_paths_keeps_absolute_and_file_url_lines():
    text = "notes\r\n/a/b\r\nfile:///c/d\nrelative/e\n  /indented\n"
    assert extract_paths(text) == ["/a/b", "/c/d"]


def test_default_config_on_a_show_path():
    src = "/mnt/storm/show/PROJ/scenes/SQ01_S010_SH020_comp_v003.exr"
    cfg = IntakeConfig()
    env = parse_envs(src, cfg)
    assert env["SHOW"] == "PROJ"
    assert env["NAME"] == "SQ01_S010_SH020_comp_v003.exr"
    assert env["SEQ"] == "SQ01"
    assert env["VER"] == "v003"
    assert resolve(src, cfg.destination, env) == "/mnt/storm/show/PROJ/shot/SQ01/S010_SH020/out/"


def test_name_values_overwrite_path_values():
    cfg = IntakeConfig(
        path_separators="/", path_keys="... X",
        name_separators="_", name_keys="X Y",
    )
    assert parse_envs("/a/left_right", cfg) == {"X": "left", "Y": "right"}


def test_groups_sources_by_destination(shots, config, tmp_path):
    plan = analyze(_lines(*sorted(shots.iterdir(), reverse=True)), config, today=TODAY)

    out = tmp_path / "out" / "PROJ" / "SQ01"
    assert sorted(plan.groups) == [
        str(out / "S010_SH020"),
        str(out / "S010_SH030"),
        str(out / "S020_SH010"),
    ]
    sh020 = plan.groups[str(out / "S010_SH020")]
    assert [os.path.basename(s.path) for s in sh020.sources] == [
        "SQ01_S010_SH020_comp_v003.exr",
        "SQ01_S010_SH020_comp_v004.exr",
    ]
    assert plan.analyzed
    assert plan.not_found == []


def test_every_valid_source_in_exactly_one_group(shots, config):
    paths = [str(p) for p in shots.iterdir()]
    plan = analyze(_lines(*paths), config, today=TODAY)

    grouped = [s.path for g in plan.groups.values() for s in g.sources]
    invalid = {i.path for i in plan.invalid}
    assert len(grouped) == len(set(grouped))
    assert set(grouped) | invalid == set(paths)
    assert not set(grouped) & invalid
    for dest, group in plan.groups.items():
        assert all(s.dest_dir == dest for s in group.sources)


def test_tokenization_failure_marks_path_invalid(shots, config):
    readme = shots / "readme.txt"
    plan = analyze(_lines(readme, shots / "SQ01_S020_SH010_comp_v001.exr"), config, today=TODAY)

    assert [i.path for i in plan.invalid] == [str(readme)]
    assert "not enough values" in plan.invalid[0].reason
    assert len(plan.sources) == 1


def test_unknown_variable_marks_path_invalid(shots, config):
    config.destination = "/out/${MISSING}"
    plan = analyze(_lines(shots / "SQ01_S020_SH010_comp_v001.exr"), config, today=TODAY)

    assert plan.groups == {}
    assert "$MISSING" in plan.invalid[0].reason


def test_missing_paths_are_recorded_not_fatal(shots, config, tmp_path):
    missing = tmp_path / "nowhere" / "SQ01_S010_SH010.exr"
    plan = analyze(_lines(missing, shots / "SQ01_S020_SH010_comp_v001.exr"), config, today=TODAY)

    assert plan.not_found == [str(missing)]
    assert len(plan.sources) == 1


def test_unexpected_stat_error_is_fatal(shots, config):
    bad = shots / "readme.txt" / "child"
    with pytest.raises(FilesystemError, match="child"):
        analyze(_lines(bad), config, today=TODAY)


def test_date_is_injected(shots, config, tmp_path):
    config.destination = f"{tmp_path}/out/${{DATE}}/${{SEQ}}"
    plan = analyze(_lines(shots / "SQ01_S020_SH010_comp_v001.exr"), config, today=TODAY)
    assert list(plan.groups) == [f"{tmp_path}/out/{TODAY}/SQ01"]


def test_destination_existence_is_checked(shots, config, tmp_path):
    existing = tmp_path / "out" / "PROJ" / "SQ01" / "S020_SH010"
    existing.mkdir(parents=True)
    plan = analyze(_lines(*shots.iterdir()), config, today=TODAY)

    assert plan.groups[str(existing)].exists
    others = [g for d, g in plan.groups.items() if d != str(existing)]
    assert others and not any(g.exists for g in others)


def test_directory_sources_are_counted(shots, config):
    plan = analyze(_lines(shots / "SQ01_S010_SH030_plates"), config, today=TODAY)
    (entry,) = plan.sources
    assert entry.is_dir
    assert entry.file_count == 3


def test_file_url_and_whitespace_and_duplicates(shots, config):
    src = shots / "SQ01_S020_SH010_comp_v001.exr"
    plan = analyze(f"file://{src}  \r\n{src}\nsome note\n", config, today=TODAY)
    assert [s.path for s in plan.sources] == [str(src)]


def test_count_files_small_dir(tmp_path):
    for name in ("a", "b", "c"):
        (tmp_path / name).write_text(name)
    assert count_files(str(tmp_path)) == 3


def test_count_files_exactly_at_cap(tmp_path):
    for i in range(1000):
        (tmp_path / f"f{i:04d}").touch()
    assert count_files(str(tmp_path)) == 1000


def test_count_files_capped(tmp_path):
    for i in range(1001):
        (tmp_path / f"f{i:04d}").touch()
    assert count_files(str(tmp_path)) == FILE_COUNT_CAPPED


def test_count_files_cap_spans_subdirectories(tmp_path):
    for d in ("one", "two"):
        (tmp_path / d).mkdir()
        for i in range(600):
            (tmp_path / d / f"f{i:04d}").touch()
    assert count_files(str(tmp_path)) == FILE_COUNT_CAPPED


def test_preview_destination(shots, config, tmp_path):
    text = _lines("header", shots / "SQ01_S020_SH010_comp_v001.exr", shots / "readme.txt")
    assert preview_destination(text, config, today=TODAY) == f"{tmp_path}/out/PROJ/SQ01/S020_SH010"


@pytest.mark.parametrize("dest, text, message", [
    ("  ", "/a/b", "please set destination"),
    ("out/${SHOW}", "/a/b", "cannot be relative"),
    ("/out", "no paths here", "filepath not found"),
])
def test_preview_destination_errors(config, dest, text, message):
    config.destination = dest
    with pytest.raises(TakeinError, match=message):
        preview_destination(text, config)


def test_relative_destination_marks_path_invalid(shots, config, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    config.destination = "out/${SHOW}"
    plan = analyze(_lines(shots / "SQ01_S020_SH010_comp_v001.exr"), config, today=TODAY)

    assert plan.groups == {}
    assert "cannot be relative" in plan.invalid[0].reason


def test_empty_destination_marks_path_invalid(shots, config):
    config.destination = "   "
    plan = analyze(_lines(shots / "SQ01_S020_SH010_comp_v001.exr"), config, today=TODAY)

    assert plan.groups == {}
    assert "cannot be relative" in plan.invalid[0].reason


def test_preview_treats_unset_environment_as_empty(config, monkeypatch):
    # ${SHOW}/out reads as "/out" in an environment without SHOW
    monkeypatch.delenv("SHOW", raising=False)
    config.destination = "${SHOW}/out"
    assert preview_destination("/src/PROJ/SQ01_S010_SH020.exr", config) == "PROJ/out"


def test_iter_files_keeps_directory_symlinks_as_entries(tmp_path):
    (tmp_path / "real" / "deep").mkdir(parents=True)
    (tmp_path / "real" / "deep" / "f").write_text("f")
    (tmp_path / "b.txt").write_text("b")
    (tmp_path / "alias").symlink_to(tmp_path / "real")

    assert list(iter_files(str(tmp_path))) == [
        str(tmp_path / "alias"),
        str(tmp_path / "b.txt"),
        str(tmp_path / "real" / "deep" / "f"),
    ]


def test_iter_files_missing_root_is_fatal(tmp_path):
    with pytest.raises(FilesystemError):
        list(iter_files(str(tmp_path / "nowhere")))
