import asyncio
import json
import logging
import os
import uuid
from pathlib import Path
from typing import Any, Callable, List, Optional, Tuple

import aiofiles
from pydantic import ValidationError as SchemaError

from core.errors import StorageError, ValidationError
from schemas.video import VideoRecord

logger = logging.getLogger(__name__)

Mutator = Callable[[VideoRecord], VideoRecord]
# Raw JSON item paired with its parsed record; record is None when it did not validate.
Entry = Tuple[Any, Optional[VideoRecord]]


def _records(entries: List[Entry]) -> List[VideoRecord]:
    return [record for _, record in entries if record is not None]


class VideoStore:
    """
    Owner of the videos.json collection.

    Every call is a full read-modify-write of the file. Calls are serialized
    through one lock, so two concurrent mutations can no longer overwrite
    each other's changes inside this process.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._lock: Optional[asyncio.Lock] = None

    @property
    def lock(self) -> asyncio.Lock:
        # Created on first use so it belongs to the loop that serves requests.
        if self._lock is None:
            self._lock = asyncio.Lock()
        return self._lock

    async def list(self) -> List[VideoRecord]:
        async with self.lock:
            return _records(await self._read())

    async def find_by_key(self, location_id: str) -> Optional[VideoRecord]:
        async with self.lock:
            for record in _records(await self._read()):
                if record.location_id == location_id:
                    return record
        return None

    async def append(self, record: VideoRecord) -> VideoRecord:
        async with self.lock:
            entries = await self._read()
            for existing in _records(entries):
                if existing.id == record.id:
                    raise ValidationError(f"Duplicate video id: {record.id}")
                if existing.location_id == record.location_id:
                    raise ValidationError(
                        f"Duplicate locationId: {record.location_id}"
                    )
            entries.append((None, record))
            await self._write(entries)
        return record

    async def update(self, location_id: str, mutator: Mutator) -> Optional[VideoRecord]:
        async with self.lock:
            entries = await self._read()
            for i, (_, record) in enumerate(entries):
                if record is not None and record.location_id == location_id:
                    updated = mutator(record)
                    entries[i] = (None, updated)
                    await self._write(entries)
                    return updated
        return None

    async def remove_by_key(self, location_id: str) -> bool:
        async with self.lock:
            entries = await self._read()
            kept = [
                (raw, record) for raw, record in entries
                if record is None or record.location_id != location_id
            ]
            if len(kept) == len(entries):
                return False
            await self._write(kept)
        return True

    async def _read(self) -> List[Entry]:
        try:
            async with aiofiles.open(self.path, "r", encoding="utf-8") as f:
                raw: Any = json.loads(await f.read())
        except FileNotFoundError:
            return []
        except (OSError, ValueError) as e:
            logger.warning("Could not read %s, treating as empty: %s", self.path, e)
            return []

        if not isinstance(raw, list):
            logger.warning("%s does not hold a list, treating as empty", self.path)
            return []

        entries: List[Entry] = []
        for item in raw:
            try:
                entries.append((item, VideoRecord.model_validate(item)))
            except SchemaError as e:
                # Kept verbatim so the next write does not drop it.
                logger.warning("Hiding malformed video entry in %s: %s", self.path, e)
                entries.append((item, None))
        return entries

    async def _write(self, entries: List[Entry]) -> None:
        payload = json.dumps(
            [
                raw if record is None else record.model_dump(mode="json", by_alias=True)
                for raw, record in entries
            ],
            ensure_ascii=False,
            indent=2,
        )
        tmp_path = self.path.with_name(f".{self.path.name}.{uuid.uuid4().hex}.tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
                await f.write(payload)
            os.replace(tmp_path, self.path)
        except OSError as e:
            if tmp_path.exists():
                tmp_path.unlink()
            raise StorageError(f"Failed to write {self.path}: {e}") from e
