# f1tv_api/version.py
__title__ = 'f1tv-api'
__version__ = '1.2.0'
__repository__ = 'https://github.com/eXhumer/f1tv-api'
