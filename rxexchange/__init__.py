# RxExchange (c) 2025 by Andreas Schawo is licensed under CC BY-SA 4.0.
# To view a copy of this license, visit http://creativecommons.org/licenses/by-sa/4.0/
"""Contest exchange resolution for ham radio contest logging"""

from . import __version__ as version

__prog_name__ = 'RxExchange'
__prog_desc__ = 'Resolve received contest exchanges into validated fields'
__author_name__ = 'Andreas Schawo'
__author_email__ = 'andreas@schawo.de'
__copyright__ = 'Copyright 2025 by Andreas Schawo,licensed under CC BY-SA 4.0'

__version__ = version.__version__

if version.__branch__:
    __version__ += '-' + version.__branch__
if version.__unclean__:
    __version__ += '-unclean'
