"""
Tests for per-network path derivation.
"""

import logging
import os
import sys

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from tincconf.config.names import make_names
from tincconf.constants import Paths


@pytest.fixture(autouse=True)
def default_dirs(monkeypatch):
    monkeypatch.delenv("TINC_CONFDIR", raising=False)
    monkeypatch.delenv("TINC_LOCALSTATEDIR", raising=False)


class TestMakeNames:

    def test_no_netname(self):
        names = make_names()
        assert names.identname == "tinc"
        assert names.confbase == "/etc/tinc"
        assert names.logfilename == "/var/log/tinc.log"
        assert names.pidfilename == "/var/run/tinc.pid"

    def test_netname(self):
        names = make_names("vpn")
        assert names.netname == "vpn"
        assert names.identname == "tinc.vpn"
        assert names.confbase == "/etc/tinc/vpn"
        assert names.logfilename == "/var/log/tinc.vpn.log"
        assert names.pidfilename == "/var/run/tinc.vpn.pid"

    def test_file_locations(self):
        names = make_names("vpn")
        assert names.server_config == "/etc/tinc/vpn/tinc.conf"
        assert names.hosts_dir == "/etc/tinc/vpn/hosts"
        assert names.private_key == "/etc/tinc/vpn/rsa_key.priv"
        assert names.public_key == "/etc/tinc/vpn/rsa_key.pub"

    def test_confbase_wins(self, caplog):
        caplog.set_level(logging.INFO)
        names = make_names("vpn", confbase="/srv/tinc")
        assert names.confbase == "/srv/tinc"
        assert names.identname == "tinc.vpn"
        assert any("using the latter" in r.getMessage() for r in caplog.records)

    def test_explicit_logfile(self):
        assert make_names(logfilename="/tmp/t.log").logfilename == "/tmp/t.log"


class TestDirectoryOverrides:
    """CONFDIR and LOCALSTATEDIR can be moved through the environment."""

    def test_confdir_override(self, monkeypatch):
        monkeypatch.setenv("TINC_CONFDIR", "/opt/etc")
        assert Paths.confdir() == "/opt/etc"
        assert make_names("vpn").confbase == "/opt/etc/tinc/vpn"

    def test_localstatedir_override(self, monkeypatch):
        monkeypatch.setenv("TINC_LOCALSTATEDIR", "/opt/var")
        names = make_names()
        assert names.logfilename == "/opt/var/log/tinc.log"
        assert names.pidfilename == "/opt/var/run/tinc.pid"

    def test_relative_override_rejected(self, monkeypatch):
        monkeypatch.setenv("TINC_CONFDIR", "relative/etc")
        assert Paths.confdir() == Paths.CONFDIR
