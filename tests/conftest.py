import pytest

from idleblank.activity import ActivitySource
from idleblank.busy import BusyPredicate
from idleblank.display import DisplayController, DisplayState


class FakeDisplay(DisplayController):
	'''Records power commands; optionally fails them.'''

	def __init__(self, state=DisplayState.ON, fail=False):
		self.state = state
		self.fail = fail
		self.commands = []
		self.requests = []

	def get_state(self):
		return self.state

	def command(self, target):
		self.commands.append(target)
		if self.fail:
			return False
		self.state = target
		return True

	def set_state(self, target):
		self.requests.append(target)
		return super().set_state(target)


class ScriptedSource(ActivitySource):
	def __init__(self, path, results):
		self.path = path
		self.results = list(results)
		self.polls = 0

	def poll(self):
		self.polls += 1
		return self.results.pop(0) if self.results else False


class FixedBusy(BusyPredicate):
	def __init__(self, busy=False):
		self.busy = busy
		self.calls = 0

	def is_busy(self):
		self.calls += 1
		return self.busy


@pytest.fixture
def display():
	return FakeDisplay()
