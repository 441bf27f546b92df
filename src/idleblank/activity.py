# idleblank.activity - input channels
# Each channel reports whether anything happened on it since the last
# poll.  Polling never blocks; event contents are discarded.

import os
import pty
import struct

import inotify_simple

import idleblank
from idleblank.logging import log

log = log.getChild('activity')

# Size of a struct input_event (struct timeval, __u16 type, __u16
# code, __s32 value) on this machine.
EVENT_SIZE = struct.calcsize('llHHi')

class ActivitySource:
	# Human-readable identifier, used in diagnostics.
	path = None

	# Acquire the underlying channel.  Raises OSError on failure.
	def open(self):
		raise NotImplementedError()

	# Consume all pending events.  Return True if there were any.
	def poll(self):
		raise NotImplementedError()

	def close(self):
		pass

	def __repr__(self):
		return '%s(%r)' % (type(self).__name__, self.path)


class InputDeviceSource(ActivitySource):
	'''An evdev or mousedev character device, read in fixed-size records.'''

	def __init__(self, path, record_size=EVENT_SIZE):
		self.path = path
		self.record_size = record_size
		self.fd = None

		# Set once a read error has been reported.
		self.read_failed = False

	def open(self):
		self.fd = os.open(self.path, os.O_RDONLY | os.O_NONBLOCK)

	def poll(self):
		activity = False
		while True:
			try:
				data = os.read(self.fd, self.record_size)
			except BlockingIOError:
				break
			except OSError as e:
				# E.g. ENODEV after the device was unplugged.  We do
				# not reopen; just stop draining for this tick.
				if not self.read_failed:
					log.warning('Error reading %s: %s', self.path, e)
					self.read_failed = True
				else:
					log.trace('Error reading %s: %s', self.path, e)
				break
			if not data:
				break
			activity = True
		return activity

	def close(self):
		if self.fd is not None:
			os.close(self.fd)
			self.fd = None


class TTYSource(ActivitySource):
	'''A terminal device, watched for modifications via inotify.'''

	def __init__(self, path):
		self.path = path
		self.inotify = None
		self.inotify_wd = None

	def open(self):
		self.inotify = inotify_simple.INotify()
		try:
			self.inotify_wd = self.inotify.add_watch(self.path, inotify_simple.flags.MODIFY)
		except OSError:
			self.inotify.close()
			self.inotify = None
			raise

	def poll(self):
		activity = False
		while self.inotify.read(timeout=0):
			activity = True
		return activity

	def close(self):
		if self.inotify is not None:
			self.inotify.close()
			self.inotify = None
			self.inotify_wd = None


# Return the path of the terminal we were started from, or None.
def get_tty():
	try:
		return os.ttyname(pty.STDERR_FILENO)
	except OSError:
		return None


def open_sources(paths, tty=None):
	'''Open an InputDeviceSource for each path, plus a TTYSource if a
	terminal is given.  Any failure is fatal: raises UserError naming
	the channel and the OS error.'''
	sources = [InputDeviceSource(path) for path in paths]
	if tty is not None:
		sources.append(TTYSource(tty))

	for source in sources:
		try:
			source.open()
		except OSError as e:
			raise idleblank.UserError('Cannot open %s: %s.' % (
				source.path,
				os.strerror(e.errno) if e.errno else e,
			))
		log.debug('Opened %r.', source)

	return sources
