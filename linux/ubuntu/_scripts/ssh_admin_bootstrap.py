#!/usr/bin/env python3
"""
SSH Admin Bootstrap
-------------------

One-shot bootstrap for a freshly installed Debian/Ubuntu server. It:

  • Creates an administrative user and adds it to the sudo group
  • Fetches the SSH public key file published at a GitHub URL (trying the raw
    form, a ?raw=1 variant and the original URL in turn) and merges any new
    keys into the user's authorized_keys
  • Backs up /etc/ssh/sshd_config and hardens it (no root login, no passwords)
  • Locks the root password and restarts the SSH service

Every step checks the current state first, so the script can be re-run safely.
Note: Run this script with root privileges.

Usage:
  sudo ./ssh_admin_bootstrap.py
  sudo ./ssh_admin_bootstrap.py --user alice --key-url https://github.com/alice/dotfiles/blob/main/id.pub
"""

import datetime
import logging
import os
import pwd
import re
import shutil
import signal
import subprocess
import sys
import tempfile
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple, Union

import click
import pyfiglet
from rich import box
from rich.align import Align
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.text import Text
from rich.theme import Theme

# ------------------------------
# Configuration
# ------------------------------
APP_NAME = "SSH Admin Bootstrap"
VERSION = "1.0.0"

DEFAULT_USERNAME = "patrickudo"
DEFAULT_KEY_URL = "https://github.com/PatrickUdo/setup_scripts/blob/main/sshkey.pub"

HOME_ROOT = "/home"
LOGIN_SHELL = "/bin/bash"
ADMIN_GROUP = "sudo"
SSHD_CONFIG_PATH = "/etc/ssh/sshd_config"
BACKUP_ROOT = "/root"

LOG_FILE = "/var/log/ssh_admin_bootstrap.log"
LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

ACCEPTED_KEY_TYPES = frozenset(
    {
        "ssh-rsa",
        "ssh-ed25519",
        "ecdsa-sha2-nistp256",
        "ecdsa-sha2-nistp384",
        "ecdsa-sha2-nistp521",
    }
)

# Applied in this order
SSHD_HARDENING_OPTIONS: Dict[str, str] = {
    "PermitRootLogin": "no",
    "PasswordAuthentication": "no",
    "ChallengeResponseAuthentication": "no",
    "PubkeyAuthentication": "yes",
    "UsePAM": "yes",
}

GITHUB_BLOB_RE = re.compile(r"^https://github\.com/([^/]+)/([^/]+)/blob/([^/]+)/(.*)$")

# ------------------------------
# Nord-Themed Console Setup
# ------------------------------
nord_theme = Theme(
    {
        "info": "#88C0D0",
        "warning": "#EBCB8B",
        "danger": "#BF616A",
        "success": "#A3BE8C",
        "primary": "#5E81AC",
        "banner": "#81A1C1",
        "frost1": "#8FBCBB",
        "frost2": "#88C0D0",
        "frost3": "#81A1C1",
        "frost4": "#5E81AC",
    }
)
console = Console(theme=nord_theme)
logger = logging.getLogger("ssh_admin_bootstrap")


# ------------------------------
# Custom Exceptions
# ------------------------------
class BootstrapError(Exception):
    """Base exception for bootstrap failures."""

    exit_code = 1


class PrivilegeError(BootstrapError):
    """Raised when the script is not running as root."""

    pass


class ToolMissingError(BootstrapError):
    """Raised when neither curl nor wget is available."""

    pass


class FetchError(BootstrapError):
    """Raised when every candidate key URL failed to download."""

    pass


class CommandError(BootstrapError):
    """Raised when a required system command fails."""

    pass


class ConfigError(BootstrapError):
    """Raised when the SSH daemon configuration cannot be read or backed up."""

    pass


# ------------------------------
# UI Helper Functions
# ------------------------------
def print_header(text: str = APP_NAME) -> None:
    """
    Render an ASCII banner with Pyfiglet.
    The font is chosen by terminal width and each line gets a frost gradient.
    """
    term_width, _ = shutil.get_terminal_size((80, 24))
    font = "slant" if term_width >= 80 else "small"
    fig = pyfiglet.Figlet(font=font, width=term_width - 10)
    frost_colors = ["frost1", "frost2", "frost3", "frost4"]
    lines = [line for line in fig.renderText(text).splitlines() if line.strip()]
    styled = Text("\n").join(
        Text(line, style=frost_colors[i % len(frost_colors)])
        for i, line in enumerate(lines)
    )
    console.print(
        Panel(
            Align.center(styled),
            border_style="banner",
            box=box.ROUNDED,
            padding=(1, 2),
            title=Text(f"v{VERSION}", style="primary"),
            title_align="right",
        )
    )


def print_section(text: str) -> None:
    """Print a section header."""
    console.print()
    console.print(f"[bold frost3]{text}[/]")
    console.print(f"[frost3]{'─' * len(text)}[/]")


def print_step(text: str) -> None:
    console.print(f"[info]• {text}[/info]")


def print_success(text: str) -> None:
    console.print(f"[bold success]✓ {text}[/bold success]")


def print_warning(text: str) -> None:
    console.print(f"[bold warning]⚠ {text}[/bold warning]")


def print_error(text: str) -> None:
    console.print(f"[bold danger]✗ {text}[/bold danger]")


# ------------------------------
# Logger Setup
# ------------------------------
def setup_logging(log_file: Union[str, Path], debug: bool = False) -> logging.Logger:
    """Send log records to the Rich console and, when possible, to a log file."""
    logger.setLevel(logging.DEBUG)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    console_handler = RichHandler(console=console, rich_tracebacks=True, show_path=False)
    console_handler.setLevel(logging.DEBUG if debug else logging.INFO)
    logger.addHandler(console_handler)

    log_file = Path(log_file)
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
    except OSError as e:
        print_warning(f"Could not open log file {log_file}: {e}")
        return logger

    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT))
    logger.addHandler(file_handler)
    try:
        os.chmod(log_file, 0o600)
    except OSError as e:
        logger.warning(f"Could not set permissions on log file {log_file}: {e}")
    return logger


# ------------------------------
# Command Execution Helper
# ------------------------------
def run_command(
    cmd: List[str],
    check: bool = True,
    capture_output: bool = True,
) -> subprocess.CompletedProcess:
    """Execute a system command, logging the command line and any failure."""
    logger.debug(f"Running command: {' '.join(cmd)}")
    try:
        return subprocess.run(
            cmd,
            check=check,
            text=True,
            capture_output=capture_output,
        )
    except subprocess.CalledProcessError as e:
        logger.error(f"Command failed: {' '.join(cmd)}")
        if e.stderr:
            logger.debug(f"Stderr: {e.stderr.strip()}")
        raise


Runner = Callable[..., subprocess.CompletedProcess]


# ------------------------------
# Data Structures
# ------------------------------
@dataclass
class BootstrapConfig:
    """Parameters for one bootstrap run."""

    username: str = DEFAULT_USERNAME
    key_url: str = DEFAULT_KEY_URL
    home_root: Path = field(default_factory=lambda: Path(HOME_ROOT))
    shell: str = LOGIN_SHELL
    admin_group: str = ADMIN_GROUP
    sshd_config: Path = field(default_factory=lambda: Path(SSHD_CONFIG_PATH))
    backup_root: Path = field(default_factory=lambda: Path(BACKUP_ROOT))
    log_file: str = LOG_FILE
    sshd_options: Dict[str, str] = field(
        default_factory=lambda: dict(SSHD_HARDENING_OPTIONS)
    )
    set_password: bool = True
    lock_root: bool = True
    restart_service: bool = True
    timestamp: str = field(
        default_factory=lambda: datetime.datetime.now().strftime("%Y%m%d%H%M%S")
    )
    home_dir: Path = field(init=False)
    ssh_dir: Path = field(init=False)
    authorized_keys: Path = field(init=False)
    backup_dir: Path = field(init=False)

    def __post_init__(self) -> None:
        self.home_root = Path(self.home_root)
        self.sshd_config = Path(self.sshd_config)
        self.backup_root = Path(self.backup_root)
        self.home_dir = self.home_root / self.username
        self.ssh_dir = self.home_dir / ".ssh"
        self.authorized_keys = self.ssh_dir / "authorized_keys"
        self.backup_dir = self.backup_root / f"setup-backups-{self.timestamp}"


@dataclass
class MergeResult:
    """Outcome of merging fetched key lines into an authorized_keys file."""

    content: str
    added: List[str] = field(default_factory=list)
    duplicates: int = 0
    rejected: int = 0

    @property
    def changed(self) -> bool:
        return bool(self.added)


@dataclass
class BootstrapReport:
    user_created: bool = False
    group_added: bool = False
    keys_added: List[str] = field(default_factory=list)
    key_source: Optional[str] = None
    directives_changed: List[str] = field(default_factory=list)
    backup_path: Optional[Path] = None
    root_locked: bool = False
    restart_method: Optional[str] = None


# ------------------------------
# Key Source Resolution & Fetching
# ------------------------------
def derive_raw_url(url: str) -> str:
    """Turn a GitHub 'blob' page URL into its raw.githubusercontent.com form."""
    return GITHUB_BLOB_RE.sub(r"https://raw.githubusercontent.com/\1/\2/\3/\4", url)


def candidate_urls(url: str) -> List[str]:
    """
    Ordered fetch attempts for a key URL: raw rewrite, ?raw=1 variant, original.
    Repeats are dropped so a non-GitHub URL is not fetched twice.
    """
    separator = "&" if "?" in url else "?"
    candidates: List[str] = []
    for candidate in (derive_raw_url(url), f"{url}{separator}raw=1", url):
        if candidate not in candidates:
            candidates.append(candidate)
    return candidates


class KeyFetcher:
    """Download a key file with curl (preferred) or wget."""

    TOOLS = ("curl", "wget")

    def __init__(
        self,
        runner: Runner = run_command,
        which: Callable[[str], Optional[str]] = shutil.which,
    ) -> None:
        self.runner = runner
        self.which = which

    def detect_tool(self) -> str:
        for tool in self.TOOLS:
            if self.which(tool):
                return tool
        raise ToolMissingError(
            "Neither curl nor wget found. Install one "
            "(e.g., apt-get update && apt-get install -y curl)."
        )

    @staticmethod
    def build_command(tool: str, url: str, dest: Path) -> List[str]:
        if tool == "curl":
            return ["curl", "-fsSL", url, "-o", str(dest)]
        return ["wget", "-qO", str(dest), url]

    def fetch(self, url: str) -> Tuple[str, str]:
        """
        Try each candidate URL once, in order.
        Returns the downloaded text and the URL that served it.
        """
        tool = self.detect_tool()
        candidates = candidate_urls(url)
        with tempfile.TemporaryDirectory(prefix="ssh_admin_bootstrap_") as tmp:
            dest = Path(tmp) / "keys.pub"
            for candidate in candidates:
                print_step(f"Trying to fetch keys from: {candidate}")
                result = self.runner(
                    self.build_command(tool, candidate, dest), check=False
                )
                if result.returncode == 0 and dest.is_file():
                    logger.info(f"Fetched key file from {candidate}")
                    return dest.read_text(encoding="utf-8", errors="replace"), candidate
                logger.warning(
                    f"{tool} could not fetch {candidate} (exit code {result.returncode})"
                )
        raise FetchError(f"Failed to fetch key file from {url}.")


# ------------------------------
# Key Merging
# ------------------------------
def is_accepted_key(line: str) -> bool:
    """True when the line starts with a supported key type followed by a payload."""
    parts = line.strip().split(None, 1)
    return len(parts) == 2 and parts[0] in ACCEPTED_KEY_TYPES


def merge_keys(fetched_text: str, existing_text: str = "") -> MergeResult:
    """
    Append the valid keys from fetched_text that are not already in existing_text.
    Existing lines are kept exactly as they are; comparisons use trimmed lines.
    """
    present = {line.strip() for line in existing_text.splitlines()}
    result = MergeResult(content=existing_text)

    for raw_line in fetched_text.splitlines():
        key = raw_line.strip()
        if not key or key.startswith("#"):
            continue
        if not is_accepted_key(key):
            result.rejected += 1
            continue
        if key in present:
            logger.debug("Key already present; skipping.")
            result.duplicates += 1
            continue
        present.add(key)
        result.added.append(key)

    if result.added:
        content = existing_text
        if content and not content.endswith("\n"):
            content += "\n"
        result.content = content + "\n".join(result.added) + "\n"
    return result


class KeyProvisioner:
    """Fetch the published keys and merge them into a user's authorized_keys."""

    def __init__(self, fetcher: Optional[KeyFetcher] = None) -> None:
        self.fetcher = fetcher or KeyFetcher()
        self.source: Optional[str] = None

    @staticmethod
    def prepare_store(ssh_dir: Path, store: Path) -> None:
        for path in (ssh_dir, store):
            if path.is_symlink():
                raise BootstrapError(f"Refusing to use {path}: it is a symbolic link.")
        ssh_dir.mkdir(parents=True, exist_ok=True)
        store.touch(exist_ok=True)
        os.chmod(ssh_dir, 0o700)
        os.chmod(store, 0o600)

    @staticmethod
    def secure_store(ssh_dir: Path, store: Path, uid: int, gid: int) -> None:
        """Give the user ownership of the .ssh tree and lock down the key store."""
        # Links inside .ssh are re-owned themselves, never their targets
        os.chown(ssh_dir, uid, gid, follow_symlinks=False)
        for root, dirs, files in os.walk(ssh_dir):
            for name in dirs + files:
                os.chown(os.path.join(root, name), uid, gid, follow_symlinks=False)
        os.chmod(ssh_dir, 0o700)
        os.chmod(store, 0o600)

    def provision(
        self, url: str, ssh_dir: Path, store: Path, uid: int, gid: int
    ) -> MergeResult:
        # Fetch first so a download failure never touches the key store
        fetched, self.source = self.fetcher.fetch(url)

        self.prepare_store(ssh_dir, store)
        existing = store.read_text(encoding="utf-8")
        result = merge_keys(fetched, existing)
        if result.rejected:
            logger.warning(
                f"Ignored {result.rejected} line(s) that are not supported public keys."
            )
        if result.changed:
            store.write_text(result.content, encoding="utf-8")
        self.secure_store(ssh_dir, store, uid, gid)
        return result


# ------------------------------
# SSH Daemon Configuration
# ------------------------------
def set_sshd_option(lines: List[str], option: str, value: str) -> List[str]:
    """
    Upsert one sshd_config directive.
    Every line naming the option, commented out or not and in any case, becomes
    'option value'. The directive is appended when no line names it.
    """
    pattern = re.compile(rf"^\s*#?\s*{re.escape(option)}\s+", re.IGNORECASE)
    directive = f"{option} {value}"
    found = False
    updated: List[str] = []
    for line in lines:
        if pattern.match(line):
            found = True
            updated.append(directive)
        else:
            updated.append(line)
    if not found:
        updated.append(directive)
    return updated


class ConfigPatcher:
    """Back up and patch an sshd_config file in place."""

    def __init__(self, path: Union[str, Path] = SSHD_CONFIG_PATH) -> None:
        self.path = Path(path)

    def backup(self, backup_dir: Path) -> Path:
        if not self.path.is_file():
            raise ConfigError(f"SSHD configuration file not found: {self.path}")
        backup_dir.mkdir(parents=True, exist_ok=True)
        backup_path = backup_dir / f"{self.path.name}.bak"
        try:
            shutil.copy2(self.path, backup_path)
        except OSError as e:
            raise ConfigError(f"Failed to back up {self.path}: {e}") from e
        logger.info(f"Backed up {self.path} to {backup_path}")
        return backup_path

    def apply(self, options: Dict[str, str]) -> List[str]:
        """Apply each directive in order. Returns the names of those that changed."""
        try:
            original = self.path.read_text(encoding="utf-8").splitlines()
        except OSError as e:
            raise ConfigError(f"Failed to read {self.path}: {e}") from e

        lines = original
        changed: List[str] = []
        for option, value in options.items():
            updated = set_sshd_option(lines, option, value)
            if updated != lines:
                changed.append(option)
            lines = updated

        if lines != original:
            self.path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return changed


# ------------------------------
# Accounts & Services
# ------------------------------
class AccountManager:
    """Thin wrapper over useradd/usermod/passwd."""

    def __init__(self, runner: Runner = run_command) -> None:
        self.runner = runner

    def user_exists(self, name: str) -> bool:
        return self.runner(["id", "-u", name], check=False).returncode == 0

    def create_user(self, name: str, shell: str, group: str) -> None:
        try:
            self.runner(["useradd", "-m", "-s", shell, "-G", group, name])
        except subprocess.CalledProcessError as e:
            raise CommandError(f"Failed to create user {name}: {e}") from e

    def set_password(self, name: str) -> None:
        # Attached to the terminal so passwd can prompt
        try:
            self.runner(["passwd", name], capture_output=False)
        except subprocess.CalledProcessError as e:
            raise CommandError(f"Failed to set password for {name}: {e}") from e

    def groups_of(self, name: str) -> List[str]:
        result = self.runner(["id", "-nG", name], check=False)
        return (result.stdout or "").split()

    def add_to_group(self, name: str, group: str) -> None:
        try:
            self.runner(["usermod", "-aG", group, name])
        except subprocess.CalledProcessError as e:
            raise CommandError(f"Failed to add {name} to {group}: {e}") from e

    def lock_password(self, name: str) -> bool:
        try:
            result = self.runner(["passwd", "-l", name], check=False)
        except OSError as e:
            logger.warning(f"Could not lock the password for {name}: {e}")
            return False
        if result.returncode != 0:
            logger.warning(f"Could not lock the password for {name}.")
            return False
        return True

    def get_ids(self, name: str) -> Tuple[int, int]:
        try:
            record = pwd.getpwnam(name)
        except KeyError as e:
            raise CommandError(f"User '{name}' not found.") from e
        return record.pw_uid, record.pw_gid


class ServiceController:
    """Restart the SSH daemon under whichever unit name this host uses."""

    def __init__(self, runner: Runner = run_command) -> None:
        self.runner = runner

    def list_service_units(self) -> List[str]:
        try:
            result = self.runner(
                ["systemctl", "list-units", "--type=service", "--all"], check=False
            )
        except OSError as e:
            logger.debug(f"systemctl unavailable: {e}")
            return []
        if result.returncode != 0:
            return []
        return (result.stdout or "").split()

    def restart_ssh(self) -> Optional[str]:
        """Returns the command that restarted SSH, or None if nothing worked."""
        units = self.list_service_units()
        for unit in ("ssh", "sshd"):
            if f"{unit}.service" in units:
                cmd = ["systemctl", "restart", unit]
                try:
                    self.runner(cmd)
                except subprocess.CalledProcessError as e:
                    raise CommandError(f"Failed to restart {unit}.service: {e}") from e
                return " ".join(cmd)

        for action in ("reload", "restart"):
            cmd = ["service", "ssh", action]
            try:
                if self.runner(cmd, check=False).returncode == 0:
                    return " ".join(cmd)
            except OSError as e:
                logger.debug(f"{' '.join(cmd)} unavailable: {e}")
        logger.warning("Could not restart the SSH service; restart it manually.")
        return None


# ------------------------------
# Bootstrap Orchestration
# ------------------------------
class HostBootstrap:
    """Runs the bootstrap steps in order against the given collaborators."""

    def __init__(
        self,
        config: BootstrapConfig,
        accounts: Optional[AccountManager] = None,
        provisioner: Optional[KeyProvisioner] = None,
        patcher: Optional[ConfigPatcher] = None,
        services: Optional[ServiceController] = None,
    ) -> None:
        self.config = config
        self.accounts = accounts or AccountManager()
        self.provisioner = provisioner or KeyProvisioner()
        self.patcher = patcher or ConfigPatcher(config.sshd_config)
        self.services = services or ServiceController()

    @staticmethod
    def check_root() -> None:
        if os.geteuid() != 0:
            raise PrivilegeError("This script must be run as root (or with sudo).")

    def ensure_user(self) -> bool:
        """Create the user if needed. Returns True when a new account was made."""
        cfg = self.config
        if self.accounts.user_exists(cfg.username):
            logger.info(f"User {cfg.username} already exists.")
            return False

        print_step(f"Creating user {cfg.username} ...")
        self.accounts.create_user(cfg.username, cfg.shell, cfg.admin_group)
        if cfg.set_password:
            console.print(f"[info]Set a password for {cfg.username}:[/info]")
            self.accounts.set_password(cfg.username)
        print_success(f"User {cfg.username} created and added to {cfg.admin_group} group.")
        return True

    def ensure_admin_group(self) -> bool:
        cfg = self.config
        if cfg.admin_group in self.accounts.groups_of(cfg.username):
            logger.info(f"{cfg.username} already in {cfg.admin_group}.")
            return False
        self.accounts.add_to_group(cfg.username, cfg.admin_group)
        print_success(f"Added {cfg.username} to {cfg.admin_group} group.")
        return True

    def install_keys(self, report: BootstrapReport) -> MergeResult:
        cfg = self.config
        uid, gid = self.accounts.get_ids(cfg.username)
        result = self.provisioner.provision(
            cfg.key_url, cfg.ssh_dir, cfg.authorized_keys, uid, gid
        )
        report.keys_added = list(result.added)
        report.key_source = self.provisioner.source
        if result.changed:
            print_success(f"Added {len(result.added)} new key(s) for {cfg.username}.")
        else:
            print_step("No new keys to add; authorized_keys unchanged.")
        return result

    def harden_sshd(self, report: BootstrapReport) -> None:
        cfg = self.config
        print_step(f"Backing up {cfg.sshd_config} to {cfg.backup_dir}")
        report.backup_path = self.patcher.backup(cfg.backup_dir)
        report.directives_changed = self.patcher.apply(cfg.sshd_options)
        if report.directives_changed:
            print_success(f"Updated: {', '.join(report.directives_changed)}")
        else:
            print_step("sshd_config already hardened.")

    def run(self) -> BootstrapReport:
        cfg = self.config
        report = BootstrapReport()

        self.check_root()
        cfg.backup_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"Backups will be stored in {cfg.backup_dir}")

        print_section("User Account")
        report.user_created = self.ensure_user()
        report.group_added = self.ensure_admin_group()

        print_section("SSH Keys")
        self.install_keys(report)

        print_section("SSH Daemon Hardening")
        self.harden_sshd(report)

        if cfg.lock_root:
            report.root_locked = self.accounts.lock_password("root")

        if cfg.restart_service:
            print_step("Restarting SSH service...")
            report.restart_method = self.services.restart_ssh()
        return report


def print_summary(report: BootstrapReport, config: BootstrapConfig, elapsed: float) -> None:
    minutes, seconds = divmod(elapsed, 60)
    keys = f"{len(report.keys_added)} added" if report.keys_added else "unchanged"
    changed = ", ".join(report.directives_changed) or "none"
    summary = (
        f"User: {config.username}{' (created)' if report.user_created else ''}\n"
        f"Authorized keys: {keys}\n"
        f"Key source: {report.key_source or 'n/a'}\n"
        f"sshd directives changed: {changed}\n"
        f"sshd_config backup: {report.backup_path}\n"
        f"Root password locked: {'yes' if report.root_locked else 'no'}\n"
        f"SSH restart: {report.restart_method or 'not restarted'}\n"
        f"Elapsed time: {int(minutes)}m {int(seconds)}s\n\n"
        f"All set. Test from a new terminal:\n"
        f"  ssh {config.username}@<server-ip>"
    )
    console.print(
        Panel(
            Text(summary, style="info"),
            title="[bold success]Bootstrap Complete[/]",
            border_style="success",
            box=box.ROUNDED,
            padding=(1, 2),
        )
    )


# ------------------------------
# Signal Handling
# ------------------------------
def signal_handler(sig, frame) -> None:
    sig_name = "SIGINT" if sig == signal.SIGINT else "SIGTERM"
    print_warning(f"Process interrupted by {sig_name}.")
    sys.exit(128 + sig)


# ------------------------------
# Main CLI Entry Point with Click
# ------------------------------
@click.command()
@click.option("--user", "username", default=DEFAULT_USERNAME, show_default=True, help="Admin user to create")
@click.option("--key-url", default=DEFAULT_KEY_URL, show_default=True, help="URL of the public key file")
@click.option("--sshd-config", default=SSHD_CONFIG_PATH, show_default=True, help="sshd_config to harden")
@click.option("--log-file", default=LOG_FILE, show_default=True, help="Log file path")
@click.option("--non-interactive", is_flag=True, help="Do not prompt for the new user's password")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(
    username: str,
    key_url: str,
    sshd_config: str,
    log_file: str,
    non_interactive: bool,
    debug: bool,
) -> None:
    """Create an admin user, install its SSH keys and harden sshd."""
    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)
    config = BootstrapConfig(
        username=username,
        key_url=key_url,
        sshd_config=Path(sshd_config),
        log_file=log_file,
        set_password=not non_interactive,
    )
    setup_logging(config.log_file, debug)
    print_header(APP_NAME)

    start_time = time.time()
    try:
        report = HostBootstrap(config).run()
    except BootstrapError as e:
        print_error(str(e))
        logger.debug(f"{type(e).__name__}: {e}")
        sys.exit(e.exit_code)
    except Exception as e:
        logger.exception(f"Bootstrap failed: {e}")
        sys.exit(1)

    print_summary(report, config, time.time() - start_time)


if __name__ == "__main__":
    main()
