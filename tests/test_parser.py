"""
Test cases for the tunnel config parser.
"""

import errno
import logging

import pytest

from wgquick.config import parse_config, resolve_config_path
from wgquick.errors import ConfigNotFoundError, InvalidConfigNameError


class TestResolveConfigPath:
    def test_bare_name_maps_into_config_dir(self, tmp_path):
        assert resolve_config_path("wg0", str(tmp_path)) == tmp_path / "wg0.conf"

    def test_path_is_taken_literally(self, tmp_path):
        arg = str(tmp_path / "wg0.conf")
        assert str(resolve_config_path(arg, "/nowhere")) == arg

    def test_overlong_name_is_treated_as_path(self):
        assert str(resolve_config_path("a" * 17, "/etc/wg")) == "a" * 17


class TestParseConfig:
    def test_passthrough_is_byte_exact(self, write_conf):
        text = "[Interface]\r\nPrivateKey = abc=\r\nListenPort = 51820\n\n# comment\n[Peer]\nPublicKey = def=\nAllowedIPs = 0.0.0.0/0"
        cfg = parse_config(str(write_conf("wg0.conf", text)))
        assert cfg.name == "wg0"
        assert cfg.residual_config == text
        assert cfg.addresses == ()
        assert cfg.dns_servers == ()
        assert cfg.mtu is None

    def test_extracts_interface_directives(self, write_conf):
        text = "[Interface]\nAddress=10.0.0.1/24\nAddress=10.0.0.2/24\nMTU=1420\n[Peer]\nAllowedIPs=0.0.0.0/0"
        cfg = parse_config(str(write_conf("wg0.conf", text)))
        assert cfg.addresses == ("10.0.0.1/24", "10.0.0.2/24")
        assert cfg.mtu == 1420
        assert cfg.residual_config == "[Interface]\n[Peer]\nAllowedIPs=0.0.0.0/0"

    def test_keys_are_case_and_whitespace_insensitive(self, write_conf):
        text = "[ interface ]\n  address = 10.0.0.1/32 , fd00::1/128\ndns = 1.1.1.1, 8.8.8.8\nDns=9.9.9.9\n"
        cfg = parse_config(str(write_conf("wg1.conf", text)))
        assert cfg.addresses == ("10.0.0.1/32", "fd00::1/128")
        assert cfg.dns_servers == ("1.1.1.1", "8.8.8.8", "9.9.9.9")
        assert cfg.residual_config == "[ interface ]\n"

    def test_directives_outside_interface_section_pass_through(self, write_conf):
        text = "[Peer]\nAddress=10.0.0.1/24\nDNS=1.1.1.1\n[Interface]\nDNS=9.9.9.9\n"
        cfg = parse_config(str(write_conf("wg0.conf", text)))
        assert cfg.addresses == ()
        assert cfg.dns_servers == ("9.9.9.9",)
        assert cfg.residual_config == "[Peer]\nAddress=10.0.0.1/24\nDNS=1.1.1.1\n[Interface]\n"

    def test_last_mtu_wins_and_garbage_is_unset(self, write_conf):
        cfg = parse_config(str(write_conf("wg0.conf", "[Interface]\nMTU=1280\nMTU=1380\n")))
        assert cfg.mtu == 1380
        cfg = parse_config(str(write_conf("wg0.conf", "[Interface]\nMTU=1280\nMTU=auto\n")))
        assert cfg.mtu is None

    def test_empty_values_pass_through(self, write_conf):
        cfg = parse_config(str(write_conf("wg0.conf", "[Interface]\nAddress=\nMTU=\n")))
        assert cfg.addresses == ()
        assert cfg.residual_config == "[Interface]\nAddress=\nMTU=\n"

    def test_empty_file(self, write_conf):
        cfg = parse_config(str(write_conf("wg0.conf", "")))
        assert cfg.name == "wg0"
        assert cfg.residual_config == ""

    def test_name_lookup_uses_config_dir(self, write_conf, tmp_path):
        write_conf("home.conf", "[Interface]\nAddress=10.1.0.2/32\n")
        cfg = parse_config("home", str(tmp_path))
        assert cfg.name == "home"
        assert cfg.addresses == ("10.1.0.2/32",)

    def test_missing_file_exits_with_errno(self, tmp_path):
        with pytest.raises(ConfigNotFoundError) as excinfo:
            parse_config("absent", str(tmp_path))
        assert excinfo.value.exit_code == errno.ENOENT
        assert "Unable to open configuration file" in str(excinfo.value)

    @pytest.mark.parametrize("filename", ["wg0.txt", "abcdefghijklmnopq.conf", ".conf", "bad name.conf"])
    def test_invalid_file_names(self, write_conf, filename):
        with pytest.raises(InvalidConfigNameError) as excinfo:
            parse_config(str(write_conf(filename, "[Interface]\n")))
        assert excinfo.value.exit_code == 77

    def test_relative_path_with_valid_stem_is_accepted(self, tmp_path, monkeypatch):
        (tmp_path / "etc").mkdir()
        conf = tmp_path / "etc" / "passwd.conf"
        conf.write_text("")
        conf.chmod(0o600)
        work = tmp_path / "a" / "b"
        work.mkdir(parents=True)
        monkeypatch.chdir(work)
        assert parse_config("../../etc/passwd.conf").name == "passwd"

    def test_warns_when_group_or_world_accessible(self, write_conf, caplog):
        caplog.set_level(logging.WARNING, logger="wg-quick")
        parse_config(str(write_conf("wg0.conf", "", mode=0o644)))
        assert "accessible to group or others" in caplog.text

    def test_private_file_does_not_warn(self, write_conf, caplog):
        caplog.set_level(logging.WARNING, logger="wg-quick")
        parse_config(str(write_conf("wg0.conf", "", mode=0o600)))
        assert caplog.text == ""
