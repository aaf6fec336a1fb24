from functools import wraps
from operator import itemgetter


def subset(d: dict, keys: list[str]) -> dict:
    """Returns a subset of a dictionary whose keys are included in keys."""
    return {k: d[k] for k in keys if k in d}


def wrap_in_tuple(fn):
    @wraps(fn)
    def _inner(d, *keys):
        if len(keys) == 0:
            return ()
        items = fn(d, *keys)
        return items if isinstance(items, tuple) else (items,)

    return _inner


@wrap_in_tuple
def get_all(d, *keys):
    """
    retrieves all keys from a dict or raises an error
    """
    _get = itemgetter(*keys)
    return _get(d)
