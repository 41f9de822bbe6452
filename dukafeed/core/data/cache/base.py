"""缓存策略和接口定义."""

from abc import ABC, abstractmethod


class ByteCache(ABC):
    """按远程路径缓存解压后字节的抽象基类."""

    @abstractmethod
    async def get(self, path: str) -> bytes | None:
        """从缓存获取数据."""
        pass

    @abstractmethod
    async def set(self, path: str, value: bytes) -> None:
        """设置缓存数据."""
        pass

    @abstractmethod
    async def delete(self, path: str) -> bool:
        """删除缓存数据."""
        pass

    @abstractmethod
    async def clear(self) -> None:
        """清空缓存."""
        pass
