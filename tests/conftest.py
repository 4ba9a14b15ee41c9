import typing

import mido
import pytest

import rondo.constants.instruments
import rondo.notation


class FakeMidiOut:

	"""MIDI output stub that keeps every message it is sent."""

	def __init__ (self) -> None:

		self.sent: typing.List[mido.Message] = []
		self.closed = False


	def send (self, message: mido.Message) -> None:

		"""Record an outgoing MIDI message."""

		self.sent.append(message)


	def close (self) -> None:

		"""Mark the fake device closed."""

		self.closed = True


	def messages_of_type (self, message_type: str) -> typing.List[mido.Message]:

		"""Return the recorded messages of one type, in send order."""

		return [message for message in self.sent if message.type == message_type]


# Module-level reference so tests can inspect the most recently opened port.
_current_fake_output: typing.Optional[FakeMidiOut] = None


def _fake_get_output_names () -> typing.List[str]:

	"""Return a fixed list of MIDI output names for tests."""

	return ["Dummy MIDI"]


def _fake_open_output (name: str) -> FakeMidiOut:

	"""Return a fresh fake MIDI output regardless of the name."""

	global _current_fake_output
	_current_fake_output = FakeMidiOut()
	return _current_fake_output


@pytest.fixture
def patch_midi (monkeypatch: pytest.MonkeyPatch) -> None:

	"""Patch mido to use a fake MIDI output for all tests that need it."""

	monkeypatch.setattr(mido, "get_output_names", _fake_get_output_names)
	monkeypatch.setattr(mido, "open_output", _fake_open_output)


@pytest.fixture
def fake_output (patch_midi: None) -> typing.Callable[[], typing.Optional[FakeMidiOut]]:

	"""Return an accessor for the fake port opened by the code under test."""

	return lambda: _current_fake_output


@pytest.fixture
def piano () -> rondo.constants.instruments.Instrument:

	"""The instrument most tests play on."""

	return rondo.constants.instruments.PIANO


@pytest.fixture
def row_your_boat (piano: rondo.constants.instruments.Instrument) -> typing.Any:

	"""A 16-beat tune used by the round and canon tests."""

	return rondo.notation.notes(
		"C C C3/4 D/4 E | E3/4 D/4 E3/4 F/4 G2 |"
		"C'/3 C'/3 C'/3 G/3 G/3 G/3 E/3 E/3 E/3 C/3 C/3 C/3 |"
		"G3/4 F/4 E3/4 D/4 C2",
		piano
	)
