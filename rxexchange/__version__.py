__version__ = 'v0.3.1'
__branch__ = ''
__unclean__ = False
