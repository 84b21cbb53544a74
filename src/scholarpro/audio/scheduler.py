from .models import AudioBuffer
from .output import AudioSource, OutputContext


class PlaybackScheduler:
    """Queues inbound audio chunks back to back on an output context.

    Each chunk starts at the later of "now" and the previous chunk's
    scheduled end, which gives gapless in-order playback without an
    explicit queue.
    """

    def __init__(self, context: OutputContext) -> None:
        self._context = context
        self._next_start_time = 0.0
        self._sources: set[AudioSource] = set()

    @property
    def next_start_time(self) -> float:
        return self._next_start_time

    @property
    def sources(self) -> set[AudioSource]:
        """Scheduled sources that have not ended yet."""
        return set(self._sources)

    def schedule(self, buffer: AudioBuffer) -> AudioSource:
        """Schedule ``buffer`` right after everything already queued."""
        self._next_start_time = max(self._next_start_time, self._context.current_time)

        source = self._context.create_source(buffer)
        source.on_ended = self._sources.discard
        source.start(self._next_start_time)

        self._next_start_time += buffer.duration
        if not source.ended:
            self._sources.add(source)
        return source

    def stop_all(self) -> None:
        """Stop every scheduled source. Idempotent."""
        for source in list(self._sources):
            source.stop()
        self._sources.clear()
