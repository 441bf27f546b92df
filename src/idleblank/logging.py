# idleblank.logging - logging implementation

import logging
import os

# Per-tick chatter goes below DEBUG.
TRACE = logging.DEBUG - 5

logging.addLevelName(TRACE, 'TRACE')

# Define a class which implements the extra severity level as a method
class Logger(logging.getLoggerClass()):
	def trace(self, *args, **kwargs):
		self.log(TRACE, *args, **kwargs)

logging.setLoggerClass(Logger)

_levels = [
	logging.CRITICAL,
	logging.ERROR,
	logging.WARNING,
	logging.INFO,
	logging.DEBUG,
	TRACE,
]

def _level(verbose):
	index = 3 + verbose
	return _levels[min(max(index, 0), len(_levels) - 1)]

logging.basicConfig(
	format=os.getenv('IDLEBLANK_LOG_FORMAT', '%(name)s: %(message)s'),
	level=_level(int(os.getenv('IDLEBLANK_VERBOSE', '0')))
)
log = logging.getLogger('idleblank')
