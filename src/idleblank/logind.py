# idleblank.logind - systemd-logind integration
# Treats a blocking "idle" inhibitor (taken e.g. by a media player
# through systemd-inhibit) as a reason to keep the display on.

import dbus

import idleblank.busy
from idleblank.logging import log

log = log.getChild('logind')

class InhibitorBusyPredicate(idleblank.busy.BusyPredicate):
	def __init__(self):
		self.system_bus = None

	def get_inhibitors(self):
		if self.system_bus is None:
			self.system_bus = dbus.SystemBus()
		obj = self.system_bus.get_object(
			bus_name='org.freedesktop.login1',
			object_path='/org/freedesktop/login1',
		)
		return obj.ListInhibitors(
			dbus_interface='org.freedesktop.login1.Manager',
		)

	def is_busy(self):
		try:
			inhibitors = self.get_inhibitors()
		except dbus.DBusException as e:
			log.warning('Failed to list logind inhibitors: %s', e)
			# Reconnect on the next tick.
			self.system_bus = None
			return False

		for what, who, why, mode, _uid, _pid in inhibitors:
			if 'idle' in str(what).split(':') and str(mode) == 'block':
				log.trace('Idle inhibited by %s (%s)', who, why)
				return True
		return False

	def __repr__(self):
		return 'InhibitorBusyPredicate()'
