# idleblank.loop - the sampling loop

import time

from idleblank.logging import log

log = log.getChild('loop')

class SamplingLoop:
	stopping = False

	def __init__(self, sources, busy, machine, period, sleep=time.sleep):
		self.sources = sources
		self.busy = busy
		self.machine = machine
		self.period = period
		self.sleep = sleep

	def tick(self):
		# Drain every source, even after one already reported activity.
		activity = False
		for source in self.sources:
			if source.poll():
				log.trace('Activity on %s', source.path)
				activity = True

		busy = self.busy.is_busy()
		return self.machine.tick(activity, busy)

	def run(self):
		log.debug('Starting sampling loop (%d sources, every %s seconds).',
				  len(self.sources), self.period)
		while not self.stopping:
			self.tick()
			self.sleep(self.period)
		log.debug('Sampling loop stopped.')

	# Ask run() to return after the current tick.
	def stop(self):
		self.stopping = True
