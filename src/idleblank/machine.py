# idleblank.machine - idle countdown
# Turns per-tick activity observations into display power decisions.

import enum

from idleblank.display import DisplayState
from idleblank.logging import log

log = log.getChild('machine')

class IdleState(enum.Enum):
	ACTIVE = 'active'      # timer at maximum
	COUNTING = 'counting'  # timer between 1 and maximum - 1
	IDLE = 'idle'          # timer at 0, display should be off


class IdleTimer:
	'''Countdown in ticks, between 0 and maximum inclusive.'''

	def __init__(self, maximum):
		if maximum < 1:
			raise ValueError('Idle timer maximum must be at least one tick, not %r' % (maximum,))
		self.maximum = maximum
		self.remaining = maximum

	def reset(self):
		self.remaining = self.maximum

	# Count down one tick.  Stays at 0 once it gets there.
	def decrement(self):
		if self.remaining > 0:
			self.remaining -= 1
		return self.remaining

	def expired(self):
		return self.remaining == 0


class IdleStateMachine:
	'''Decides, once per tick, whether the display should be on or off.

	The display state itself is not remembered here; the controller is
	asked to set it and will check the actual state first.  Nothing is
	sent to the display until the first tick that calls for it.'''

	def __init__(self, controller, maximum):
		self.controller = controller
		self.timer = IdleTimer(maximum)
		self.state = IdleState.ACTIVE

	def tick(self, activity_observed, busy):
		if activity_observed or busy:
			# Activity always wins over expiry within the same tick.
			self.timer.reset()
			self.controller.set_state(DisplayState.ON)
			self.state = IdleState.ACTIVE
		else:
			self.timer.decrement()
			if self.timer.expired():
				if self.state != IdleState.IDLE:
					log.debug('Idle for %d ticks.', self.timer.maximum)
				# Repeated every idle tick; a no-op while the display is off.
				self.controller.set_state(DisplayState.OFF)
				self.state = IdleState.IDLE
			else:
				self.state = IdleState.COUNTING

		log.trace('activity=%s busy=%s timer=%d state=%s',
				  activity_observed, busy, self.timer.remaining, self.state.value)
		return self.state
