"""Key generation and distribution for SSH hosts."""

import logging
import os
import subprocess
from pathlib import Path
from typing import Dict, Optional

from lxcspawn.ssh.config import HostEntry, add_host, find_host, parse_hosts, remove_host
from lxcspawn.utils.commands import run_command


logger = logging.getLogger(__name__)


class SSHKeyManager:
    """Manages ed25519 keys and ``Host`` entries in an SSH client config."""

    def __init__(self, ssh_dir: Optional[Path] = None, config_file: Optional[Path] = None):
        """Initialize the manager."""
        self.ssh_dir = Path(ssh_dir) if ssh_dir else Path.home() / ".ssh"
        self.config_file = Path(config_file) if config_file else self.ssh_dir / "config"

    def _read_config(self) -> str:
        if not self.config_file.exists():
            return ""
        return self.config_file.read_text()

    def _write_config(self, text: str):
        self.config_file.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
        self.config_file.write_text(text)
        os.chmod(self.config_file, 0o600)

    def key_path(self, key_name: str) -> Path:
        """Location of a private key by file name or path."""
        path = Path(key_name).expanduser()
        return path if path.is_absolute() else self.ssh_dir / path

    def generate_key(self, key_path: Path, comment: str = "") -> bool:
        """Generate an ed25519 key pair. Returns False if the key exists."""
        if key_path.exists():
            logger.info(f"Key {key_path} already exists, skipping generation")
            return False
        key_path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
        logger.info(f"Generating ed25519 keypair at {key_path}")
        # Interactive: ssh-keygen asks for the passphrase
        run_command(
            ["ssh-keygen", "-t", "ed25519", "-f", str(key_path), "-C", comment],
            capture_output=False,
        )
        return True

    def copy_id(self, key_path: Path, user: str, hostname: str):
        """Install the public key on the remote host."""
        logger.info(f"Copying public key to {user}@{hostname}")
        run_command(
            ["ssh-copy-id", "-i", f"{key_path}.pub", f"{user}@{hostname}"],
            capture_output=False,
        )

    def setup_host(self, entry: HostEntry, comment: str = "") -> bool:
        """Create a key, install it and record the host.

        Returns True if a config entry was added, False if the alias was
        already configured.
        """
        key_path = self.key_path(entry.identity_file)
        self.generate_key(key_path, comment)
        self.copy_id(key_path, entry.user, entry.hostname)

        text = self._read_config()
        recorded = HostEntry(
            alias=entry.alias,
            hostname=entry.hostname,
            user=entry.user,
            identity_file=str(key_path),
        )
        updated = add_host(text, recorded)
        if updated == text:
            logger.info(f"Config already has an entry for {entry.alias}, skipping")
            return False
        self._write_config(updated)
        logger.info(f"Config entry added for {entry.alias}")
        return True

    def cleanup_host(self, alias: str) -> Optional[Path]:
        """Remove the entry for ``alias`` and delete its key files.

        Returns the deleted private key path, if any.
        """
        text = self._read_config()
        entry = find_host(text, alias)
        if entry is None:
            logger.info(f"No config entry for {alias}")
            return None

        self._write_config(remove_host(text, alias))
        logger.info(f"Removed config entry for {alias}")

        if not entry.identity_file:
            return None
        key_path = self.key_path(entry.identity_file)
        if not key_path.is_file():
            return None
        logger.info(f"Deleting key files {key_path} and {key_path}.pub")
        key_path.unlink()
        public = Path(f"{key_path}.pub")
        if public.exists():
            public.unlink()
        return key_path

    def batch_setup(self) -> Dict[str, bool]:
        """Install keys for every complete ``Host`` entry.

        A failure for one host is logged and the remaining hosts are still
        processed. Returns alias -> success; incomplete entries are skipped.
        """
        results: Dict[str, bool] = {}
        for entry in parse_hosts(self._read_config()):
            if not entry.complete:
                logger.warning(f"Missing info for {entry.alias}, skipping")
                continue
            key_path = self.key_path(entry.identity_file)
            try:
                self.generate_key(key_path, f"{entry.alias}-key")
                self.copy_id(key_path, entry.user, entry.hostname)
                results[entry.alias] = True
            except (subprocess.CalledProcessError, OSError) as e:
                logger.error(f"Failed to copy key for {entry.alias}: {e}")
                results[entry.alias] = False
        return results
