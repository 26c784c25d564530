import pytest

import ssh_admin_bootstrap as sab
from bootstrap_fakes import UBUNTU_SSHD_CONFIG


@pytest.fixture
def as_root(monkeypatch):
    monkeypatch.setattr(sab.os, "geteuid", lambda: 0)


@pytest.fixture
def sshd_config(tmp_path):
    path = tmp_path / "etc" / "ssh" / "sshd_config"
    path.parent.mkdir(parents=True)
    path.write_text(UBUNTU_SSHD_CONFIG)
    return path


@pytest.fixture
def config(tmp_path, sshd_config):
    return sab.BootstrapConfig(
        username="deploy",
        key_url="https://github.com/acme/setup_scripts/blob/main/sshkey.pub",
        home_root=tmp_path / "home",
        sshd_config=sshd_config,
        backup_root=tmp_path / "root",
        log_file=str(tmp_path / "bootstrap.log"),
        timestamp="20240101120000",
    )
