import os
import tempfile
from pathlib import Path


class VaultPaths:
    """Resolves document paths against the vault root."""

    def __init__(self, vault_root: Path) -> None:
        self._root = Path(vault_root).resolve()

    @property
    def root(self) -> Path:
        return self._root

    def resolve(self, path: str | Path) -> Path:
        """Absolute paths are used as-is; anything else is vault-relative."""
        candidate = Path(path)
        if candidate.is_absolute():
            return candidate
        return self._root / candidate

    def relative(self, path: str | Path) -> str:
        """Vault-relative POSIX path when ``path`` lies inside the vault.

        Paths outside the vault are returned absolute.
        """
        absolute = self.resolve(path).resolve()
        try:
            return absolute.relative_to(self._root).as_posix()
        except ValueError:
            return str(absolute)


def atomic_write_bytes(path: Path, data: bytes) -> None:
    """Write ``data`` to a sibling temp file, then rename it over ``path``.

    A crash mid-write leaves the previous file intact.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
