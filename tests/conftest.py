from pathlib import Path

import pytest

from takein.schemas import IntakeConfig


@pytest.fixture(autouse=True)
def config_dir(tmp_path, monkeypatch) -> Path:
    """Keep every test away from the real ~/.config/takein."""
    d = tmp_path / "config"
    monkeypatch.setenv("TAKEIN_CONFIG_DIR", str(d))
    return d


@pytest.fixture
def shots(tmp_path) -> Path:
    """
    A small show tree:

        src/PROJ/SQ01_S010_SH020_comp_v003.exr
        src/PROJ/SQ01_S010_SH020_comp_v004.exr
        src/PROJ/SQ01_S020_SH010_comp_v001.exr
        src/PROJ/SQ01_S010_SH030_plates/{a.dpx,b.dpx,sub/c.dpx}
        src/PROJ/readme.txt
    """
    proj = tmp_path / "src" / "PROJ"
    proj.mkdir(parents=True)
    (proj / "SQ01_S010_SH020_comp_v003.exr").write_text("v003")
    (proj / "SQ01_S010_SH020_comp_v004.exr").write_text("v004")
    (proj / "SQ01_S020_SH010_comp_v001.exr").write_text("v001")
    plates = proj / "SQ01_S010_SH030_plates"
    (plates / "sub").mkdir(parents=True)
    (plates / "a.dpx").write_text("a")
    (plates / "b.dpx").write_text("b")
    (plates / "sub" / "c.dpx").write_text("c")
    (proj / "readme.txt").write_text("readme")
    return proj


@pytest.fixture
def config(tmp_path) -> IntakeConfig:
    return IntakeConfig(
        path_separators="/",
        path_keys="... SHOW _",
        name_separators=". _",
        name_keys="SEQ SCENE SHOT ...",
        destination=f"{tmp_path}/out/${{SHOW}}/${{SEQ}}/${{SCENE}}_${{SHOT}}",
    )
