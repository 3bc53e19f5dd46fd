from .misc import ZERO_INSTANT, format_stamp, now_local
