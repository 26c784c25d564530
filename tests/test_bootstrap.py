import os

import pytest

import ssh_admin_bootstrap as sab
from bootstrap_fakes import (
    ED25519_KEY,
    UBUNTU_SSHD_CONFIG,
    FakeAccounts,
    FakeDownloader,
    FakeServices,
    only_curl,
)

RAW_URL = "https://raw.githubusercontent.com/acme/setup_scripts/main/sshkey.pub"


def make_bootstrap(config, accounts=None, bodies=None, services=None):
    downloader = FakeDownloader({RAW_URL: ED25519_KEY + "\n"} if bodies is None else bodies)
    fetcher = sab.KeyFetcher(runner=downloader, which=only_curl)
    return sab.HostBootstrap(
        config,
        accounts=accounts or FakeAccounts(),
        provisioner=sab.KeyProvisioner(fetcher),
        patcher=sab.ConfigPatcher(config.sshd_config),
        services=services or FakeServices(),
    )


def test_config_derives_paths(tmp_path):
    cfg = sab.BootstrapConfig(
        username="alice", home_root=tmp_path, backup_root="/root", timestamp="20240101120000"
    )
    assert cfg.authorized_keys == tmp_path / "alice" / ".ssh" / "authorized_keys"
    assert str(cfg.backup_dir) == "/root/setup-backups-20240101120000"


def test_default_config_matches_constants():
    cfg = sab.BootstrapConfig()
    assert cfg.username == sab.DEFAULT_USERNAME
    assert str(cfg.sshd_config) == "/etc/ssh/sshd_config"
    assert list(cfg.sshd_options) == list(sab.SSHD_HARDENING_OPTIONS)


def test_full_run_on_fresh_host(as_root, config):
    accounts = FakeAccounts()
    services = FakeServices()

    report = make_bootstrap(config, accounts=accounts, services=services).run()

    assert accounts.created == [("deploy", "/bin/bash", "sudo")]
    assert accounts.passwords_set == ["deploy"]
    assert accounts.group_adds == []
    assert report.user_created
    assert report.keys_added == [ED25519_KEY]
    assert report.key_source == RAW_URL
    assert config.authorized_keys.read_text() == ED25519_KEY + "\n"
    assert (config.authorized_keys.stat().st_mode & 0o777) == 0o600
    assert (config.ssh_dir.stat().st_mode & 0o777) == 0o700
    assert "PermitRootLogin no" in config.sshd_config.read_text().splitlines()
    assert report.backup_path.read_text() == UBUNTU_SSHD_CONFIG
    assert report.backup_path.parent == config.backup_dir
    assert accounts.locked == ["root"]
    assert services.restarts == 1
    assert report.restart_method == "systemctl restart ssh"


def test_existing_user_is_added_to_group(as_root, config):
    accounts = FakeAccounts(exists=True, groups=["deploy"])
    report = make_bootstrap(config, accounts=accounts).run()

    assert accounts.created == []
    assert accounts.passwords_set == []
    assert accounts.group_adds == [("deploy", "sudo")]
    assert report.group_added


def test_second_run_changes_nothing(as_root, config):
    accounts = FakeAccounts()
    make_bootstrap(config, accounts=accounts).run()
    keys = config.authorized_keys.read_text()
    sshd = config.sshd_config.read_text()

    report = make_bootstrap(config, accounts=accounts).run()

    assert not report.user_created
    assert report.keys_added == []
    assert report.directives_changed == []
    assert config.authorized_keys.read_text() == keys
    assert config.sshd_config.read_text() == sshd


def test_existing_keys_are_kept(as_root, config):
    config.ssh_dir.mkdir(parents=True)
    config.authorized_keys.write_text("ssh-rsa AAAAB3Nza old@box\n")

    make_bootstrap(config).run()

    assert config.authorized_keys.read_text().splitlines() == [
        "ssh-rsa AAAAB3Nza old@box",
        ED25519_KEY,
    ]


def test_fetch_failure_leaves_store_and_sshd_untouched(as_root, config):
    services = FakeServices()
    bootstrap = make_bootstrap(config, bodies={}, services=services)

    with pytest.raises(sab.FetchError):
        bootstrap.run()

    assert not config.ssh_dir.exists()
    assert config.sshd_config.read_text() == UBUNTU_SSHD_CONFIG
    assert services.restarts == 0


def test_non_root_stops_before_any_change(monkeypatch, config):
    monkeypatch.setattr(sab.os, "geteuid", lambda: 1000)
    accounts = FakeAccounts()

    with pytest.raises(sab.PrivilegeError):
        make_bootstrap(config, accounts=accounts).run()

    assert not config.backup_dir.exists()
    assert accounts.created == []


def test_non_interactive_skips_password_prompt(as_root, config):
    config.set_password = False
    accounts = FakeAccounts()
    make_bootstrap(config, accounts=accounts).run()
    assert accounts.created
    assert accounts.passwords_set == []


def test_rejected_lines_are_logged_as_one_warning(as_root, config, caplog):
    bodies = {RAW_URL: "<html>\n<body>\n" + ED25519_KEY + "\n</html>\n"}
    with caplog.at_level("WARNING", logger="ssh_admin_bootstrap"):
        report = make_bootstrap(config, bodies=bodies).run()

    assert report.keys_added == [ED25519_KEY]
    warnings = [r.getMessage() for r in caplog.records if "Ignored" in r.getMessage()]
    assert warnings == ["Ignored 3 line(s) that are not supported public keys."]


def make_provisioner():
    downloader = FakeDownloader({RAW_URL: ED25519_KEY + "\n"})
    return sab.KeyProvisioner(sab.KeyFetcher(runner=downloader, which=only_curl))


def test_links_inside_ssh_dir_are_chowned_without_following(monkeypatch, tmp_path, config):
    target = tmp_path / "shadow"
    target.write_text("root:x:0:0\n")
    before = target.stat()
    config.ssh_dir.mkdir(parents=True)
    link = config.ssh_dir / "known_hosts"
    link.symlink_to(target)

    chowned = []

    def chown(path, uid, gid, *, follow_symlinks=True):
        chowned.append((os.fspath(path), follow_symlinks))

    monkeypatch.setattr(sab.os, "chown", chown)
    make_provisioner().provision(
        config.key_url, config.ssh_dir, config.authorized_keys, 4242, 4242
    )

    assert (str(link), False) in chowned
    assert all(follow is False for _, follow in chowned)
    assert str(target) not in [path for path, _ in chowned]
    after = target.stat()
    assert (after.st_uid, after.st_gid) == (before.st_uid, before.st_gid)
    assert target.read_text() == "root:x:0:0\n"


def test_symlinked_authorized_keys_is_refused(tmp_path, config):
    target = tmp_path / "shadow"
    target.write_text("root:x:0:0\n")
    os.chmod(target, 0o644)
    config.ssh_dir.mkdir(parents=True)
    config.authorized_keys.symlink_to(target)

    with pytest.raises(sab.BootstrapError, match="symbolic link"):
        make_provisioner().provision(
            config.key_url, config.ssh_dir, config.authorized_keys, os.getuid(), os.getgid()
        )

    assert target.read_text() == "root:x:0:0\n"
    assert (target.stat().st_mode & 0o777) == 0o644


def test_symlinked_ssh_dir_is_refused(tmp_path, config):
    elsewhere = tmp_path / "elsewhere"
    elsewhere.mkdir()
    config.ssh_dir.parent.mkdir(parents=True)
    config.ssh_dir.symlink_to(elsewhere)

    with pytest.raises(sab.BootstrapError, match="symbolic link"):
        make_provisioner().provision(
            config.key_url, config.ssh_dir, config.authorized_keys, os.getuid(), os.getgid()
        )

    assert list(elsewhere.iterdir()) == []
