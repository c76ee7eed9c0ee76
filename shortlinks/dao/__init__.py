from shortlinks.dao.factory import build_daos


__all__ = [
    'build_daos',
]
