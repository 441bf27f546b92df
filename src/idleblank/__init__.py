# idleblank.__init__ - core definitions and entry point
# Watches input devices and "keep-awake" processes, and powers the
# HDMI display off after a period of inactivity.

import os
import sys

# -----------------------------------------------------------------------------
# Timing

# Seconds between two ticks of the sampling loop.
TICK_PERIOD = 2

# Seconds of inactivity after which the display is turned off.
IDLE_TIMEOUT = 60 * 2

# The idle timeout, expressed in ticks.
IDLE_TICKS = max(1, IDLE_TIMEOUT // TICK_PERIOD)

# -----------------------------------------------------------------------------
# Devices and commands

# Input devices whose events count as activity (see
# /proc/bus/input/devices).  All of them must be readable on start-up.
INPUT_DEVICES = [
	'/dev/input/event0',  # keyboard
	'/dev/input/mouse0',  # pointer
]

# While any process matching one of these names is running, the
# display is kept on.
BUSY_PROCESSES = [
	'omxplayer',
]

TVSERVICE = '/opt/vc/bin/tvservice'

CMD_DISPLAY_STATUS = [TVSERVICE, '--status']
CMD_DISPLAY_ON = [TVSERVICE, '--preferred']
CMD_DISPLAY_OFF = [TVSERVICE, '--off']

# Run after powering the display on; the frame buffer and X need a
# nudge to redraw.
CMD_DISPLAY_REFRESH = [
	['fbset', '-depth', '8'],
	['fbset', '-depth', '16'],
	['xrefresh'],
]

# What the status command prints when the display is powered off.
STATUS_OFF = b'state 0x120002 [TV is off]'

# -----------------------------------------------------------------------------
# Process environment

# Do not fork away from the terminal.  Useful for debugging and for
# running under a service manager.
foreground = bool(os.getenv('IDLEBLANK_FOREGROUND'))

is_systemd = False
try:
	is_systemd = os.readlink('/bin/init').endswith('/systemd')
except OSError:
	pass

# -----------------------------------------------------------------------------
# Exceptions

# Represents an expected failure mode, which is unlikely to be due to
# a bug in idleblank.  In this case, we do not need to print an
# exception stack trace; just print the error message and quit.
class UserError(Exception):
	pass

# -----------------------------------------------------------------------------
# Import idleblank modules
# Placed after the declarations above, so that they can be used by the
# imported modules.

import idleblank.activity
import idleblank.busy
import idleblank.daemon
import idleblank.display
import idleblank.loop
import idleblank.machine
from idleblank.logging import log

# -----------------------------------------------------------------------------
# Wiring

def get_busy_predicate():
	predicates = [idleblank.busy.ProcessBusyPredicate(BUSY_PROCESSES)]
	if is_systemd:
		# Loaded on demand; only needed on systemd machines.
		try:
			from idleblank import logind
		except ImportError as e:
			log.warning('Cannot honor logind idle inhibitors (%s); '
						'install dbus-python to enable this.', e)
		else:
			log.debug('Detected systemd - also honoring logind idle inhibitors')
			predicates.append(logind.InhibitorBusyPredicate())
	return idleblank.busy.AnyBusy(predicates)

def create_loop(sources):
	controller = idleblank.display.TVServiceController()
	machine = idleblank.machine.IdleStateMachine(controller, IDLE_TICKS)
	return idleblank.loop.SamplingLoop(
		sources,
		get_busy_predicate(),
		machine,
		TICK_PERIOD,
	)

# -----------------------------------------------------------------------------
# Entry point

def main():
	args = sys.argv[1:]

	if args:
		sys.stderr.write('Usage: idleblank\n\nTakes no arguments.\n')
		return 2

	try:
		paths = list(INPUT_DEVICES)

		# The terminal is only watched once the daemon has detached
		# from it; in the foreground it receives our own log output.
		tty = None
		if not foreground:
			tty = idleblank.activity.get_tty()
			if tty is not None:
				log.info('Will also watch controlling terminal %s.', tty)

		# Must all succeed before anything else happens.
		sources = idleblank.activity.open_sources(paths)

		loop = create_loop(sources)
		return idleblank.daemon.start(loop, fork=not foreground, tty=tty)

	except UserError as e:
		log.critical('Fatal error: %s', e)
		return 1
