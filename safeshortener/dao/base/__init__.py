from safeshortener.dao.base.short_link_base_dao import ShortLinkBaseDAO
from safeshortener.dao.base.counter_base_dao import CounterBaseDAO


__all__ = [
    'ShortLinkBaseDAO',
    'CounterBaseDAO',
]
