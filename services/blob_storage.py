import logging
from pathlib import Path

import aiofiles

from core.config import CHUNK_SIZE
from core.errors import StorageError, ValidationError

logger = logging.getLogger(__name__)


class LocalBlobStorage:
    """Video payloads stored as plain files in one directory."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def ensure_dir(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)

    def path_for(self, name: str) -> Path:
        # Names are generated by us, but locationIds also arrive from URLs.
        if not name or Path(name).name != name or name in (".", ".."):
            raise ValidationError(f"Invalid storage name: {name!r}")
        return self.root / name

    def exists(self, name: str) -> bool:
        return self.path_for(name).is_file()

    async def save(self, name: str, content: bytes) -> Path:
        path = self.path_for(name)
        try:
            self.ensure_dir()
            async with aiofiles.open(path, "wb") as out:
                for start in range(0, len(content), CHUNK_SIZE):
                    await out.write(content[start:start + CHUNK_SIZE])
        except OSError as e:
            if path.exists():
                path.unlink()
            raise StorageError(f"Failed to write video file {path}: {e}") from e
        return path

    async def delete(self, name: str) -> bool:
        """
        Remove a stored payload.

        Returns False when there was nothing to remove, which callers treat
        as success.
        """
        path = self.path_for(name)
        try:
            path.unlink()
        except FileNotFoundError:
            logger.info("Video file %s already absent", path)
            return False
        except OSError as e:
            raise StorageError(f"Failed to delete video file {path}: {e}") from e
        return True
