"""
Unit tests for multitarget.core.project.
"""

from multitarget.core.project import (
    find_project_root,
    glue_path,
    is_in_project,
    resolve_project_root,
)


class TestFindProjectRoot:
    def test_finds_root_from_subdirectory(self, project_dir):
        nested = project_dir / "core-lib" / "src"
        nested.mkdir(parents=True)

        assert find_project_root(nested) == project_dir.resolve()

    def test_returns_none_outside_project(self, tmp_path):
        assert find_project_root(tmp_path) is None
        assert is_in_project(tmp_path) is False

    def test_glue_directory_is_not_a_marker(self, tmp_path):
        (tmp_path / "glue.toml").mkdir()

        assert find_project_root(tmp_path) is None

    def test_defaults_to_cwd(self, project_dir, monkeypatch):
        monkeypatch.chdir(project_dir)

        assert find_project_root() == project_dir.resolve()
        assert is_in_project() is True


class TestResolveProjectRoot:
    def test_inside_project(self, project_dir):
        sub = project_dir / "tests"
        sub.mkdir()

        assert resolve_project_root(sub) == project_dir.resolve()

    def test_falls_back_to_start_directory(self, tmp_path):
        assert resolve_project_root(tmp_path) == tmp_path.resolve()

    def test_glue_path(self, tmp_path):
        assert glue_path(tmp_path) == tmp_path / "glue.toml"
