"""
Settings tests

Tests defaults and the environment / Zeta.toml configuration sources.
"""

import pytest
from pydantic import ValidationError

from zeta.config.settings import AppSettings


@pytest.fixture
def project_dir(tmp_path, monkeypatch):
    """Run in an empty project directory with no ZETA_ variables set"""
    monkeypatch.chdir(tmp_path)
    for name in ("ZETA_REPOSITORY", "ZETA_DEFAULT_BRANCH", "ZETA_MAX_DEPTH"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


class TestDefaults:
    """Test values without any configuration"""

    def test_defaults(self, project_dir):
        settings = AppSettings()
        assert settings.repository == ""
        assert settings.default_branch is None
        assert settings.image_prefix == "/images"
        assert settings.max_depth == 32
        assert settings.qiita_dir == "public"
        assert settings.zenn_dir == "articles"

    def test_inline_footnote_name(self, project_dir):
        """Inline footnote ids are prefix.inline.N"""
        assert AppSettings().inlineFootnote_name(3) == "zeta.inline.3"
        assert AppSettings(inline_footnote_prefix="x").inlineFootnote_name(1) == "x.inline.1"


class TestSources:
    """Test configuration sources"""

    def test_toml_file(self, project_dir):
        """Zeta.toml provides the repository"""
        (project_dir / "Zeta.toml").write_text('repository = "user/repo"\n', encoding="utf-8")
        assert AppSettings().repository == "user/repo"

    def test_environment_overrides_toml(self, project_dir, monkeypatch):
        """ZETA_ variables take precedence over Zeta.toml"""
        (project_dir / "Zeta.toml").write_text('repository = "user/repo"\n', encoding="utf-8")
        monkeypatch.setenv("ZETA_REPOSITORY", "other/repo")
        assert AppSettings().repository == "other/repo"

    def test_environment_max_depth(self, project_dir, monkeypatch):
        monkeypatch.setenv("ZETA_MAX_DEPTH", "4")
        assert AppSettings().max_depth == 4

    def test_max_depth_must_be_positive(self, project_dir):
        with pytest.raises(ValidationError):
            AppSettings(max_depth=0)
