"""
general_output.py

Console and logfile output shared by the walkerstore modules.
"""

import os

from . import config


def logprint(*text):
    """
    Print to stdout (unless print_progress is off) and, once config.init()
    has run, append the same line to the logfile in the output directory.
    """
    settings = config.SETTINGS
    if settings is None:
        print(*text)
        return
    if settings.print_progress:
        print(*text)
    with open(os.path.join(settings.outdir, 'logfile_' + settings.now + '.log'), 'a') as f:
        print(*text, file=f)
