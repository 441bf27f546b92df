# idleblank.daemon - daemon lifecycle

import os
import signal
import sys

import idleblank
import idleblank.activity
from idleblank.logging import log

log = log.getChild('daemon')

# Test if we were already started as a daemon (e.g. by init).
def is_daemon():
	return os.getppid() == 1


# Detach from the controlling terminal and session, and drop the
# standard streams.
def detach():
	try:
		os.setsid()
	except OSError as e:
		raise idleblank.UserError('Cannot detach from session: %s' % (e,))
	os.chdir('/')

	fd = os.open(os.devnull, os.O_RDWR)
	for std_fd in (0, 1, 2):
		os.dup2(fd, std_fd)
	if fd > 2:
		os.close(fd)

	os.umask(0o027)


# Start counting writes to the terminal we were started from as
# activity.  Only safe once nothing of ours writes to it any more;
# earlier writes are not seen.
def watch_tty(loop, tty):
	loop.sources.extend(idleblank.activity.open_sources([], tty))


# Daemon entry point.
def start(loop, fork=True, tty=None):
	'''Runs the sampling loop, in a detached fork unless fork is False
	or we are already a daemon.  Returns an exit status.

	tty, if given, is watched for activity, but only by a detached
	daemon: in the foreground our own log output goes there.'''

	if fork and not is_daemon():
		# Flush now, so buffered output is not written twice.
		sys.stdout.flush()
		sys.stderr.flush()

		try:
			daemon_pid = os.fork()
		except OSError as e:
			raise idleblank.UserError('Cannot fork: %s' % (e,))
		if daemon_pid != 0:
			return 0

		# Inside the forked process.  Last words to the terminal.
		log.info('Daemon started (PID %d).', os.getpid())
		detach()

		if tty is not None:
			watch_tty(loop, tty)
	elif tty is not None:
		log.debug('Not detached; not watching %s.', tty)

	# Stop gracefully when receiving a SIGINT/SIGTERM.  The display
	# is left as it is.
	def signal_stop(signalnum, _frame):
		log.info('Got signal %r - stopping.', signal.strsignal(signalnum))
		loop.stop()

	signal.signal(signal.SIGINT, signal_stop)
	signal.signal(signal.SIGTERM, signal_stop)

	loop.run()

	log.debug('Daemon is exiting.')
	return 0
