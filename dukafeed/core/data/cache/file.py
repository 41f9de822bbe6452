"""扁平目录文件缓存实现."""

from __future__ import annotations

import asyncio
import os
import tempfile
from pathlib import Path

from dukafeed.core.data.cache.base import ByteCache
from dukafeed.core.data.cache.key import cache_key
from dukafeed.core.exceptions import CacheError
from dukafeed.core.logging import logger


class FileCache(ByteCache):
    """每个远程路径对应缓存根目录下的一个文件.

    文件内容即解压后的字节。并发写同一文件时以最后一次写入为准，
    写入先落到临时文件再原子替换，读者不会看到半个文件。
    """

    def __init__(self, folder: str | os.PathLike[str]) -> None:
        self.folder = Path(folder)

    def file_for(self, path: str) -> Path:
        return self.folder / cache_key(path)

    def _read(self, target: Path) -> bytes | None:
        try:
            return target.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise CacheError(f"Failed to read cache file {target}: {e}", key=target.name) from e

    def _write(self, target: Path, value: bytes) -> None:
        try:
            self.folder.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.folder, prefix=f".{target.name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "wb") as tmp:
                    tmp.write(value)
                os.replace(tmp_name, target)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise CacheError(f"Failed to write cache file {target}: {e}", key=target.name) from e

    def _unlink(self, target: Path) -> bool:
        try:
            target.unlink()
            return True
        except FileNotFoundError:
            return False

    def _clear(self) -> None:
        if not self.folder.exists():
            return
        for entry in self.folder.iterdir():
            if entry.is_file():
                entry.unlink(missing_ok=True)

    # 磁盘 I/O 在线程池中执行，不阻塞事件循环
    async def get(self, path: str) -> bytes | None:
        return await asyncio.to_thread(self._read, self.file_for(path))

    async def set(self, path: str, value: bytes) -> None:
        target = self.file_for(path)
        await asyncio.to_thread(self._write, target, value)
        logger.debug("cache write", cache_file=str(target), size=len(value))

    async def delete(self, path: str) -> bool:
        return await asyncio.to_thread(self._unlink, self.file_for(path))

    async def clear(self) -> None:
        await asyncio.to_thread(self._clear)

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and self.file_for(path).exists()
