from safeshortener.dao.memory.short_link_memory_dao import ShortLinkMemoryDAO
from safeshortener.dao.memory.counter_memory_dao import CounterMemoryDAO


__all__ = [
    'ShortLinkMemoryDAO',
    'CounterMemoryDAO',
]
