# tests/test_config.py
import pytest

from secretgate.config import SecretGateConfig
from secretgate.errors import ConfigError


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)


class TestDefaults:
    def test_defaults_without_file(self):
        config = SecretGateConfig.load()
        assert config.required_commands == ["git"]
        assert config.search_path is None
        assert config.excluded_paths == []
        assert config.entropy.enabled is False
        assert config.report_format == "text"

    def test_empty_file_uses_defaults(self, tmp_path):
        (tmp_path / ".secretgate.yml").write_text("")
        assert SecretGateConfig.load().required_commands == ["git"]


class TestLoad:
    def test_reads_file_in_cwd(self, tmp_path):
        (tmp_path / ".secretgate.yml").write_text("disabled_rules: [bearer-token]\n")
        assert SecretGateConfig.load().disabled_rules == ["bearer-token"]

    def test_explicit_path_wins(self, tmp_path):
        (tmp_path / ".secretgate.yml").write_text("disabled_rules: [bearer-token]\n")
        other = tmp_path / "other.yml"
        other.write_text("disabled_rules: [slack-token]\n")
        assert SecretGateConfig.load(other).disabled_rules == ["slack-token"]

    def test_entropy_enabled_accepts_booleans(self, tmp_path):
        (tmp_path / ".secretgate.yml").write_text("entropy:\n  enabled: false\n")
        assert SecretGateConfig.load().entropy.enabled is False

    def test_missing_explicit_path(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            SecretGateConfig.load(tmp_path / "nope.yml")

    def test_deep_merge_keeps_unset_keys(self, tmp_path):
        cfg_file = tmp_path / "c.yml"
        cfg_file.write_text("entropy:\n  enabled: true\n")
        config = SecretGateConfig.load(cfg_file)
        assert config.entropy.enabled is True
        assert config.entropy.threshold == 4.5
        assert config.entropy.min_length == 20

    def test_full_file(self, tmp_path):
        cfg_file = tmp_path / "c.yml"
        cfg_file.write_text(
            "required_commands: [git, gpg]\n"
            "search_path: [/opt/bin]\n"
            "exclusions:\n  paths: ['tests/fixtures/*']\n"
            "rules:\n"
            "  - id: internal-token\n"
            "    description: Internal token\n"
            "    pattern: 'itk_[0-9a-f]{8}'\n"
            "  - id: forbidden-name\n"
            "    pattern: 'secrets\\.txt$'\n"
            "    target: path\n"
            "report:\n  format: json\n"
        )
        config = SecretGateConfig.load(cfg_file)
        assert config.required_commands == ["git", "gpg"]
        assert config.search_path == ["/opt/bin"]
        assert config.is_path_excluded("tests/fixtures/key.pem")
        assert not config.is_path_excluded("src/key.pem")
        assert [r.rule_id for r in config.rules] == ["internal-token", "forbidden-name"]
        assert config.rules[0].description == "Internal token"
        assert config.rules[1].description == "forbidden-name"
        assert config.rules[1].target == "path"
        assert config.report_format == "json"


class TestInvalid:
    @pytest.mark.parametrize(
        "content, message",
        [
            ("key: [unclosed\n", "invalid YAML"),
            ("- a\n- b\n", "mapping"),
            ("required_commands: git\n", "required_commands"),
            ("exclusions: [a]\n", "exclusions"),
            ("rules:\n  - pattern: x\n", "rules\\[0\\]"),
            ("rules:\n  - {id: a, pattern: x, target: body}\n", "target"),
            ("entropy:\n  threshold: lots\n", "numeric"),
            ("entropy:\n  enabled: \"false\"\n", "entropy.enabled"),
            ("entropy:\n  enabled: 1\n", "entropy.enabled"),
            ("report:\n  format: xml\n", "report.format"),
        ],
    )
    def test_raises_config_error(self, tmp_path, content, message):
        cfg_file = tmp_path / "bad.yml"
        cfg_file.write_text(content)
        with pytest.raises(ConfigError, match=message):
            SecretGateConfig.load(cfg_file)


class TestDiscovery:
    def test_found_from_subdirectory(self, tmp_path, monkeypatch):
        (tmp_path / ".git").mkdir()
        (tmp_path / ".secretgate.yml").write_text("disabled_rules: [bearer-token]\n")
        nested = tmp_path / "src" / "pkg"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)
        assert SecretGateConfig.load().disabled_rules == ["bearer-token"]

    def test_nearest_file_wins(self, tmp_path, monkeypatch):
        (tmp_path / ".git").mkdir()
        (tmp_path / ".secretgate.yml").write_text("disabled_rules: [bearer-token]\n")
        nested = tmp_path / "sub"
        nested.mkdir()
        (nested / ".secretgate.yml").write_text("disabled_rules: [slack-token]\n")
        monkeypatch.chdir(nested)
        assert SecretGateConfig.load().disabled_rules == ["slack-token"]

    def test_stops_at_repository_root(self, tmp_path, monkeypatch):
        (tmp_path / ".secretgate.yml").write_text("disabled_rules: [bearer-token]\n")
        repo = tmp_path / "repo"
        (repo / ".git").mkdir(parents=True)
        monkeypatch.chdir(repo)
        assert SecretGateConfig.load().disabled_rules == []

