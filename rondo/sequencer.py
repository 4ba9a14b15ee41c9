import asyncio
import dataclasses
import heapq
import itertools
import logging
import math
import time
import typing

import mido

import rondo.constants
import rondo.constants.instruments
import rondo.midi_utils
import rondo.pitch


logger = logging.getLogger(__name__)


# Ordering of events that share a pulse: patch the channel first, then end
# notes before starting new ones so a repeated pitch is retriggered.
PRIORITY_PROGRAM_CHANGE = 0
PRIORITY_NOTE_OFF = 1
PRIORITY_NOTE_ON = 2


class ChannelExhaustedError (RuntimeError):

	"""
	Raised when more instruments are used than there are MIDI channels.
	"""


@dataclasses.dataclass (order=True)
class MidiEvent:

	"""
	Represents a MIDI event scheduled at a specific pulse.
	"""

	pulse: int
	priority: int
	sequence: int
	message_type: str = dataclasses.field(compare=False)
	channel: int = dataclasses.field(compare=False)
	note: int = dataclasses.field(compare=False, default=0)
	velocity: int = dataclasses.field(compare=False, default=0)
	value: int = dataclasses.field(compare=False, default=0)
	data: typing.Any = dataclasses.field(compare=False, default=None)


class Sequencer:

	"""
	Plays compositions through a MIDI output against a steady clock.

	The `Sequencer` is a `rondo.player.SequencePlayer`: compositions call
	`schedule_note` and `schedule_callback` on it, then `start` drives the
	clock.  Time is kept in integer pulses (``pulses_per_beat`` per beat).
	At each pulse, due callbacks run first - they may schedule more notes,
	including for the current pulse - and then due MIDI events are sent.
	"""

	def __init__ (
		self,
		output_device_name: typing.Optional[str] = None,
		initial_bpm: float = rondo.constants.DEFAULT_BPM,
		pulses_per_beat: int = rondo.constants.PULSES_PER_BEAT,
		realtime: bool = True,
		spin_wait: bool = True,
		stop_beat: typing.Optional[float] = None
	) -> None:

		"""Initialize the sequencer with a MIDI device and tempo.

		Parameters:
			output_device_name: MIDI output device name. When omitted, auto-discovers
				available devices - uses the only device if one is found, or prompts
				the user to choose if multiple are available.
			initial_bpm: Tempo in beats per minute.
			pulses_per_beat: Clock resolution. Note times are rounded to the nearest pulse.
			realtime: When False, time is simulated and playback runs as fast as
				possible.  Useful for checking a composition without waiting for it.
			spin_wait: When True (default), use a hybrid sleep+spin strategy for the
				final sub-millisecond of each pulse interval to reduce jitter.
			stop_beat: Stop playback when the clock reaches this beat.  Without it,
				music containing a live ``forever`` plays until interrupted.
		"""

		if pulses_per_beat <= 0:
			raise ValueError("Pulses per beat must be positive")

		self.output_device_name = output_device_name
		self.pulses_per_beat = pulses_per_beat
		self.realtime = realtime
		self.stop_beat = stop_beat

		self.event_queue: typing.List[MidiEvent] = []
		self._event_counter = itertools.count()
		self.callback_queue: typing.List[typing.Tuple[int, int, typing.Callable[[], None]]] = []
		self._callback_counter = itertools.count()

		# Notes waiting to start, keyed so duplicate requests collapse into one.
		self._pending_notes: typing.Set[typing.Tuple[int, int, int, int]] = set()
		self.active_notes: typing.Set[typing.Tuple[int, int]] = set()

		self.channels: typing.Dict[rondo.constants.instruments.Instrument, int] = {}
		self._free_channels: typing.List[int] = [
			channel for channel in range(rondo.constants.MIDI_CHANNELS)
			if channel != rondo.constants.GM_PERCUSSION_CHANNEL
		]

		self.task: typing.Optional[asyncio.Task] = None
		self.start_time = 0.0
		self.pulse_count = 0
		self.running = False

		# Timing variables
		self.current_bpm: float = 0
		self.seconds_per_beat = 0.0
		self.seconds_per_pulse = 0.0
		self._spin_wait: bool = spin_wait
		# Sleep to within this many seconds of the target, then busy-wait.
		self._spin_threshold: float = 0.001

		self.set_bpm(initial_bpm)

		self.midi_out = None
		self._init_midi_output()


	def set_bpm (self, bpm: float) -> None:

		"""
		Instantly change the tempo.
		"""

		if bpm <= 0:
			raise ValueError("BPM must be positive")

		self.current_bpm = bpm
		self.seconds_per_beat = 60.0 / self.current_bpm
		self.seconds_per_pulse = self.seconds_per_beat / self.pulses_per_beat

		logger.info(f"BPM set to {self.current_bpm:.2f}")


	def _init_midi_output (self) -> None:

		"""
		Open the MIDI output port.
		"""

		device_name, midi_out = rondo.midi_utils.select_output_device(self.output_device_name)

		if device_name:
			self.output_device_name = device_name
			self.midi_out = midi_out


	@property
	def current_beat (self) -> float:

		return self.pulse_count / self.pulses_per_beat


	def beat_to_pulse (self, beat: float) -> int:

		"""
		Convert a beat position to the nearest pulse.
		"""

		return int(round(beat * self.pulses_per_beat))


	def channel_for (self, instrument: rondo.constants.instruments.Instrument) -> int:

		"""Return the MIDI channel playing ``instrument``, allocating one if needed.

		A newly allocated channel is patched to the instrument's program before
		any of its notes sound.

		Raises:
			ChannelExhaustedError: If every melodic channel is already in use.
		"""

		if instrument in self.channels:
			return self.channels[instrument]

		if not self._free_channels:
			raise ChannelExhaustedError(
				f"Tried to use too many instruments: limited to {len(self.channels)}"
			)

		channel = self._free_channels.pop(0)
		self.channels[instrument] = channel

		self._push_event(
			pulse = self.pulse_count,
			priority = PRIORITY_PROGRAM_CHANGE,
			message_type = 'program_change',
			channel = channel,
			value = instrument.program
		)

		logger.debug(f"Assigned channel {channel} to {instrument}")

		return channel


	def _push_event (self, pulse: int, priority: int, message_type: str, channel: int, **fields: typing.Any) -> None:

		event = MidiEvent(
			pulse = pulse,
			priority = priority,
			sequence = next(self._event_counter),
			message_type = message_type,
			channel = channel,
			**fields
		)

		heapq.heappush(self.event_queue, event)


	def schedule_note (self, instrument: rondo.constants.instruments.Instrument, pitch: rondo.pitch.Pitch, start_beat: float, num_beats: float) -> None:

		"""
		Queue a note_on at ``start_beat`` and a note_off ``num_beats`` later.

		Notes shorter than one pulse are dropped.  A note identical to one
		that has not started yet is ignored.

		Raises:
			ValueError: If the start is negative, the length is negative, or the
				pitch has no MIDI note number (outside 0-127).
		"""

		if not math.isfinite(start_beat):
			logger.debug(f"Ignoring note {pitch} at unreachable beat {start_beat}")
			return

		if start_beat < 0:
			raise ValueError(f"Cannot schedule a note at negative beat {start_beat}")

		if num_beats < 0:
			raise ValueError(f"Note length cannot be negative, got {num_beats}")

		note = pitch.midi_note()

		if not 0 <= note <= rondo.constants.MIDI_NOTE_MAX:
			raise ValueError(f"Pitch {pitch} is outside the MIDI note range (MIDI note {note})")

		channel = self.channel_for(instrument)
		start_pulse = self.beat_to_pulse(start_beat)
		end_pulse = self.beat_to_pulse(start_beat + num_beats)

		if end_pulse <= start_pulse:
			logger.debug(f"Dropping note {pitch} at beat {start_beat}: shorter than one pulse")
			return

		key = (channel, note, start_pulse, end_pulse)

		if key in self._pending_notes:
			return

		self._pending_notes.add(key)

		self._push_event(
			pulse = start_pulse,
			priority = PRIORITY_NOTE_ON,
			message_type = 'note_on',
			channel = channel,
			note = note,
			velocity = rondo.constants.DEFAULT_VELOCITY,
			data = key
		)

		self._push_event(
			pulse = end_pulse,
			priority = PRIORITY_NOTE_OFF,
			message_type = 'note_off',
			channel = channel,
			note = note,
			velocity = 0
		)


	def schedule_callback (self, beat: float, callback: typing.Callable[[], None]) -> None:

		"""
		Run ``callback`` when the clock reaches ``beat``.
		"""

		if not math.isfinite(beat):
			logger.debug(f"Ignoring callback at unreachable beat {beat}")
			return

		counter = next(self._callback_counter)
		heapq.heappush(self.callback_queue, (self.beat_to_pulse(beat), counter, callback))


	def start (self) -> None:

		"""
		Play everything scheduled, blocking until playback ends or Ctrl+C.
		"""

		try:
			asyncio.run(self.run())

		except KeyboardInterrupt:
			pass


	async def run (self) -> None:

		"""
		Start playback and wait for it to finish, then release the device.
		"""

		if self.running:
			return

		self.running = True
		self.task = asyncio.create_task(self._run_loop())

		logger.info("Sequencer started")

		try:
			await self.task
		except asyncio.CancelledError:
			pass
		finally:
			await self.stop()


	async def stop (self) -> None:

		"""
		Stop playback and silence anything still sounding.
		"""

		if not self.running and self.midi_out is None and not self.active_notes:
			return

		logger.info("Stopping sequencer...")

		self.running = False

		if self.task and not self.task.done():
			await self.task

		await self.panic()

		if self.midi_out:
			self.midi_out.close()  # type: ignore[unreachable]
			self.midi_out = None

		logger.info("Sequencer stopped")


	def _is_finished (self) -> bool:

		return not self.event_queue and not self.active_notes and not self.callback_queue


	async def _run_loop (self) -> None:

		"""Playback loop driven by the internal clock.

		In realtime mode the loop sleeps between pulses to hold the tempo.
		Otherwise it simulates time, processing one pulse per iteration with
		no delay.
		"""

		self.start_time = time.perf_counter()
		self.pulse_count = 0

		stop_pulse = self.beat_to_pulse(self.stop_beat) if self.stop_beat is not None else None
		next_pulse_time = self.start_time

		while self.running:

			if self._is_finished():
				logger.info("Sequence complete (no more events or active notes).")
				self.running = False
				break

			if stop_pulse is not None and self.pulse_count > stop_pulse:
				logger.info(f"Reached stop beat {self.stop_beat}")
				self.running = False
				break

			current_time = time.perf_counter() if self.realtime else next_pulse_time

			while current_time >= next_pulse_time:

				self._advance_pulse()
				next_pulse_time += self.seconds_per_pulse

				if not self.realtime:
					break

			if self.realtime:
				sleep_time = next_pulse_time - time.perf_counter()

				if sleep_time > 0:
					if self._spin_wait and sleep_time > self._spin_threshold:
						await asyncio.sleep(sleep_time - self._spin_threshold)
						while time.perf_counter() < next_pulse_time:
							pass
					else:
						await asyncio.sleep(sleep_time)
			else:
				# Let other tasks on the loop run between simulated pulses.
				await asyncio.sleep(0)


	def _advance_pulse (self) -> None:

		"""
		Fire due callbacks, send due events, and move the clock on one pulse.
		"""

		self._fire_callbacks(self.pulse_count)
		self._process_pulse(self.pulse_count)
		self.pulse_count += 1


	def _fire_callbacks (self, pulse: int) -> None:

		"""
		Run every callback due at or before ``pulse``, including ones they schedule.
		"""

		while self.callback_queue and self.callback_queue[0][0] <= pulse:
			_, _, callback = heapq.heappop(self.callback_queue)
			callback()


	def _process_pulse (self, pulse: int) -> None:

		"""
		Send every MIDI event due at or before ``pulse``.
		"""

		while self.event_queue and self.event_queue[0].pulse <= pulse:

			event = heapq.heappop(self.event_queue)

			if event.message_type == 'note_on':
				self._pending_notes.discard(event.data)
				self.active_notes.add((event.channel, event.note))

			elif event.message_type == 'note_off':
				self.active_notes.discard((event.channel, event.note))

			# Late events are sent immediately.
			self._send_midi(event)


	def _send_midi (self, event: MidiEvent) -> None:

		"""
		Send a MIDI message to the output port.
		"""

		if self.midi_out:

			try:  # type: ignore[unreachable]

				if event.message_type in ('note_on', 'note_off'):
					msg = mido.Message(
						event.message_type,
						channel = event.channel,
						note = event.note,
						velocity = event.velocity
					)

				elif event.message_type == 'program_change':
					msg = mido.Message(
						'program_change',
						channel = event.channel,
						program = event.value
					)

				else:
					return

				self.midi_out.send(msg)

			except Exception:
				logger.exception("MIDI send failed (device may be disconnected)")


	async def _stop_all_active_notes (self) -> None:

		"""
		Send note_off for all currently tracked active notes.
		"""

		for channel, note in list(self.active_notes):
			if self.midi_out:
				self.midi_out.send(mido.Message('note_off', channel=channel, note=note, velocity=0))  # type: ignore[unreachable]

		self.active_notes.clear()


	async def panic (self) -> None:

		"""
		Send a MIDI panic message to all channels.
		"""

		logger.info("Panic: sending all notes off.")

		await self._stop_all_active_notes()

		if self.midi_out:

			try:  # type: ignore[unreachable]

				# "All Notes Off" (CC 123) and "All Sound Off" (CC 120) on every channel
				for channel in range(rondo.constants.MIDI_CHANNELS):
					self.midi_out.send(mido.Message('control_change', channel=channel, control=123, value=0))
					self.midi_out.send(mido.Message('control_change', channel=channel, control=120, value=0))

			except Exception:
				logger.exception("MIDI panic failed (device may be disconnected)")


	def describe (self) -> str:

		"""
		Return a listing of every queued MIDI event in time order, one per line.
		"""

		lines: typing.List[str] = []

		for event in sorted(self.event_queue):

			if event.message_type == 'note_on':
				detail = f"NOTE_ON  channel {event.channel} pitch {event.note}"
			elif event.message_type == 'note_off':
				detail = f"NOTE_OFF channel {event.channel} pitch {event.note}"
			elif event.message_type == 'program_change':
				detail = f"PROGRAM  channel {event.channel} program {event.value}"
			else:
				detail = event.message_type

			lines.append(f"pulse {event.pulse}: {detail}")

		for pulse, _, _ in sorted(self.callback_queue, key=lambda item: item[:2]):
			lines.append(f"pulse {pulse}: CALLBACK")

		return "\n".join(lines)
