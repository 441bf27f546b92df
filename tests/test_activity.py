import os

import pytest

import idleblank
from idleblank import activity as activity_module
from idleblank.activity import EVENT_SIZE, InputDeviceSource, TTYSource, open_sources


@pytest.fixture
def fifo(tmp_path):
	path = str(tmp_path / 'event0')
	os.mkfifo(path)
	return path


def test_input_device_drains_pending_events(fifo):
	source = InputDeviceSource(fifo)
	source.open()
	writer = os.open(fifo, os.O_WRONLY | os.O_NONBLOCK)
	try:
		assert not source.poll()

		os.write(writer, b'\0' * EVENT_SIZE * 3)
		assert source.poll()
		# Everything was consumed by the previous poll.
		assert not source.poll()
	finally:
		os.close(writer)
		source.close()


def test_input_device_poll_without_writer_does_not_block(fifo):
	source = InputDeviceSource(fifo)
	source.open()
	try:
		assert not source.poll()
	finally:
		source.close()


def test_tty_source_reports_modification(tmp_path):
	tty = tmp_path / 'tty'
	tty.write_bytes(b'')
	source = TTYSource(str(tty))
	source.open()
	try:
		assert not source.poll()

		with open(tty, 'ab') as f:
			f.write(b'x')
		assert source.poll()
		assert not source.poll()
	finally:
		source.close()


def test_tty_source_missing(tmp_path):
	source = TTYSource(str(tmp_path / 'missing'))
	with pytest.raises(OSError):
		source.open()
	assert source.inotify is None


def test_open_sources(fifo, tmp_path):
	tty = tmp_path / 'tty'
	tty.write_bytes(b'')
	sources = open_sources([fifo], str(tty))
	try:
		assert [type(s) for s in sources] == [InputDeviceSource, TTYSource]
		assert [s.path for s in sources] == [fifo, str(tty)]
	finally:
		for source in sources:
			source.close()


def test_open_sources_fails_on_second_channel(fifo, tmp_path, monkeypatch):
	missing = str(tmp_path / 'mouse0')
	opened = []
	original_open = InputDeviceSource.open

	def recording_open(self):
		original_open(self)
		opened.append(self)
	monkeypatch.setattr(InputDeviceSource, 'open', recording_open)

	with pytest.raises(idleblank.UserError) as e:
		open_sources([fifo, missing])

	assert str(e.value) == 'Cannot open %s: No such file or directory.' % missing
	assert [s.path for s in opened] == [fifo]
	opened[0].close()


def test_read_error_logged_once(fifo, monkeypatch, caplog):
	source = InputDeviceSource(fifo)
	source.open()

	def unplugged(fd, size):
		raise OSError(19, 'No such device')
	monkeypatch.setattr(activity_module.os, 'read', unplugged)
	try:
		for _ in range(3):
			assert not source.poll()
	finally:
		monkeypatch.undo()
		source.close()

	warnings = [r for r in caplog.records if r.levelname == 'WARNING']
	assert len(warnings) == 1
	assert fifo in warnings[0].getMessage()
