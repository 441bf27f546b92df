# idleblank.display - display power control
# Queries the display's power state before changing it, so that
# repeated requests for the state it is already in cost one status
# query and no power command.

import enum
import os
import subprocess

import idleblank
from idleblank.logging import log

log = log.getChild('display')

class DisplayState(enum.Enum):
	ERROR = -1
	OFF = 0
	ON = 1


class DisplayController:
	# Return the current DisplayState.
	def get_state(self):
		raise NotImplementedError()

	# Issue the hardware command for target (ON or OFF).
	# Return True if it succeeded.
	def command(self, target):
		raise NotImplementedError()

	def set_state(self, target):
		'''Bring the display into the target state.  Returns the state
		the display is believed to be in afterwards.'''
		state = self.get_state()
		if state == target:
			return target

		log.info('Turning display %s (was %s).', target.name.lower(), state.name.lower())
		if self.command(target):
			return target

		log.warning('Failed to turn display %s.', target.name.lower())
		return state


class TVServiceController(DisplayController):
	'''Drives the Raspberry Pi HDMI output through tvservice.'''

	def __init__(self,
				 status_cmd=idleblank.CMD_DISPLAY_STATUS,
				 on_cmd=idleblank.CMD_DISPLAY_ON,
				 off_cmd=idleblank.CMD_DISPLAY_OFF,
				 refresh_cmds=idleblank.CMD_DISPLAY_REFRESH,
				 status_off=idleblank.STATUS_OFF):
		self.status_cmd = status_cmd
		self.on_cmd = on_cmd
		self.off_cmd = off_cmd
		self.refresh_cmds = refresh_cmds
		self.status_off = status_off

	def get_state(self):
		try:
			result = subprocess.run(
				self.status_cmd,
				stdin=subprocess.DEVNULL,
				stdout=subprocess.PIPE,
				stderr=subprocess.DEVNULL,
			)
		except OSError as e:
			log.warning('Failed to query display status: %s', e)
			return DisplayState.ERROR

		# Only the prefix matters; anything else tvservice prints
		# means the display is on.
		if result.stdout[:len(self.status_off)] == self.status_off:
			return DisplayState.OFF
		return DisplayState.ON

	def command(self, target):
		if target == DisplayState.ON:
			if not self.run(self.on_cmd):
				return False
			for cmd in self.refresh_cmds:
				if not self.run(cmd):
					log.warning('Display refresh command %r failed.', cmd[0])
			return True
		elif target == DisplayState.OFF:
			return self.run(self.off_cmd)
		else:
			raise ValueError('Cannot set display state to %r' % (target,))

	def run(self, cmd):
		log.debug('Running %r', cmd)
		try:
			subprocess.check_call(
				cmd,
				stdin=subprocess.DEVNULL,
				stdout=subprocess.DEVNULL,
				env=dict(os.environ, DISPLAY=os.getenv('DISPLAY', ':0')),
			)
		except (OSError, subprocess.CalledProcessError) as e:
			log.debug('%r failed: %s', cmd[0], e)
			return False
		return True
