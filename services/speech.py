# services/speech.py
"""Speech-to-text session over a pluggable recognition engine.

The engine does the actual recognition (a browser bridge, a local model,
...). It is configured with ``RecognitionOptions``, started with the
session as its listener, and reports back through ``on_engine_result``,
``on_engine_error`` and ``on_engine_end``.
"""
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Protocol

logger = logging.getLogger(__name__)


@dataclass
class RecognitionOptions:
    continuous: bool = True
    interim_results: bool = True
    language: str = "en-US"
    max_alternatives: int = 1


@dataclass
class SpeechAlternative:
    transcript: str
    confidence: Optional[float] = None


@dataclass
class SpeechResult:
    alternatives: List[SpeechAlternative] = field(default_factory=list)
    is_final: bool = False


@dataclass
class Transcript:
    transcript: str
    confidence: float
    is_final: bool


class RecognitionEngine(Protocol):
    def configure(self, options: RecognitionOptions) -> None: ...
    def start(self, listener: "SpeechRecognizer") -> None: ...
    def stop(self) -> None: ...


class SpeechRecognizer:

    def __init__(self, engine: Optional[RecognitionEngine] = None,
                 options: Optional[RecognitionOptions] = None):
        self.engine = engine
        self.options = options or RecognitionOptions()
        self.is_listening = False
        self._on_result: Optional[Callable[[Transcript], None]] = None
        self._on_error: Optional[Callable[[str], None]] = None
        self._on_end: Optional[Callable[[], None]] = None
        if self.engine is not None:
            self.engine.configure(self.options)

    def is_supported(self) -> bool:
        return self.engine is not None

    def start_listening(self, on_result: Callable[[Transcript], None],
                        on_error: Optional[Callable[[str], None]] = None,
                        on_end: Optional[Callable[[], None]] = None,
                        options: Optional[RecognitionOptions] = None) -> bool:
        if self.engine is None or self.is_listening:
            return False

        self._on_result, self._on_error, self._on_end = on_result, on_error, on_end
        if options is not None:
            self.options = options
            self.engine.configure(options)

        try:
            self.engine.start(self)
        except Exception:
            logger.exception("Failed to start speech recognition")
            return False
        self.is_listening = True
        return True

    def stop_listening(self) -> None:
        if self.engine is not None and self.is_listening:
            self.engine.stop()
            self.is_listening = False

    # ---- engine callbacks ----
    def on_engine_result(self, results: List[SpeechResult]) -> None:
        if not results or not results[-1].alternatives:
            return
        last = results[-1]
        best = last.alternatives[0]
        if self._on_result:
            self._on_result(Transcript(
                transcript=best.transcript.strip(),
                confidence=best.confidence or 0,
                is_final=last.is_final,
            ))

    def on_engine_error(self, error: str) -> None:
        logger.error("Speech recognition error: %s", error)
        if self._on_error:
            self._on_error(error)

    def on_engine_end(self) -> None:
        self.is_listening = False
        if self._on_end:
            self._on_end()
