"""缓存键生成."""

CACHE_KEY_DELIMITER = "-"


def cache_key(path: str) -> str:
    """将远程路径压平为单个文件名.

    ``EURUSD/2019/01/04/00h_ticks.bi5`` -> ``EURUSD-2019-01-04-00h_ticks.bi5``
    """
    return path.strip("/").replace("/", CACHE_KEY_DELIMITER).replace("\\", CACHE_KEY_DELIMITER)
