# idleblank.busy - "keep-awake" checks
# A busy predicate suppresses idling while it holds, regardless of
# input activity.  It is re-evaluated on every tick.

import subprocess

from idleblank.logging import log

log = log.getChild('busy')

class BusyPredicate:
	def is_busy(self):
		raise NotImplementedError()


class ProcessBusyPredicate(BusyPredicate):
	'''Busy while a process whose name matches one of the patterns is
	running.  Uses pgrep.'''

	def __init__(self, patterns):
		self.patterns = list(patterns)

	def is_busy(self):
		if not self.patterns:
			return False
		try:
			returncode = subprocess.call(
				['pgrep', '|'.join(self.patterns)],
				stdin=subprocess.DEVNULL,
				stdout=subprocess.DEVNULL,
				stderr=subprocess.DEVNULL,
			)
		except OSError as e:
			# Not being able to check must not keep the display on.
			log.warning('Failed to run pgrep: %s', e)
			return False
		return returncode == 0


class AnyBusy(BusyPredicate):
	'''Busy if any of the given predicates is.'''

	def __init__(self, predicates):
		self.predicates = list(predicates)

	def is_busy(self):
		for predicate in self.predicates:
			if predicate.is_busy():
				log.trace('Busy: %r', predicate)
				return True
		return False
