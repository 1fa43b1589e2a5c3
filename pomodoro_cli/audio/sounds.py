"""End-of-session chimes, synthesised with numpy and played by QSoundEffect.

Each chime is a short sequence of :class:`Tone` steps rendered by one
builder, written once to the sounds cache as a 16-bit mono WAV file and
loaded from there on later launches.

Sound names
-----------
- ``work_complete``:  rising C-major arpeggio when a work session ends
- ``break_complete``: single A4 bell when a break ends
"""

from __future__ import annotations

import io
import wave
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from PyQt6.QtCore import QObject, QUrl
from PyQt6.QtMultimedia import QSoundEffect

from ..log import get_logger
from ..settings import DATA_DIR

logger = get_logger(__name__)


SOUNDS_DIR = DATA_DIR / "sounds"
SAMPLE_RATE = 44100


# ═══════════════════════════════════════════════════════════════════════════
#  CHIME DEFINITIONS
# ═══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class Tone:
    """One step of a chime.

    ``partials`` maps frequency (Hz) to amplitude; the envelope times are
    in seconds and ``sustain`` is the level held between decay and release.
    """

    partials: tuple[tuple[float, float], ...]
    seconds: float
    attack: float
    decay: float
    sustain: float
    release: float
    gap: float = 0.0


def _note(freq: float, seconds: float, sustain: float, release: float, gap: float = 0.02) -> Tone:
    return Tone(((freq, 0.5),), seconds, 0.0015, seconds / 3, sustain, release, gap)


CHIMES: dict[str, tuple[Tone, ...]] = {
    "work_complete": (
        _note(523.25, 0.10, 0.3, 0.005),
        _note(659.25, 0.10, 0.3, 0.005),
        _note(783.99, 0.10, 0.3, 0.005),
        _note(1046.50, 0.35, 0.5, 0.014, gap=0.0),
    ),
    "break_complete": (
        Tone(((440.0, 0.35), (880.0, 0.08)), 1.0, 0.08, 0.3, 0.25, 0.55),
    ),
}

SOUND_NAMES = tuple(CHIMES)


# ═══════════════════════════════════════════════════════════════════════════
#  SYNTHESIS
# ═══════════════════════════════════════════════════════════════════════════


def envelope(tone: Tone, count: int) -> np.ndarray:
    """Attack/decay/sustain/release gain curve sampled *count* times."""
    total = count / SAMPLE_RATE
    peak = min(tone.attack, total)
    settle = min(peak + tone.decay, total)
    fade = max(total - tone.release, settle)
    t = np.arange(count) / SAMPLE_RATE
    return np.interp(
        t,
        [0.0, peak, settle, fade, total],
        [0.0, 1.0, tone.sustain, tone.sustain, 0.0],
    )


def _render(tones: tuple[Tone, ...]) -> np.ndarray:
    chunks: list[np.ndarray] = []
    for tone in tones:
        count = int(SAMPLE_RATE * tone.seconds)
        t = np.arange(count) / SAMPLE_RATE
        wave_form = sum(amp * np.sin(2 * np.pi * freq * t) for freq, amp in tone.partials)
        chunks.append(wave_form * envelope(tone, count))
        if tone.gap:
            chunks.append(np.zeros(int(SAMPLE_RATE * tone.gap)))
    return np.concatenate(chunks)


def chime_wav(name: str) -> bytes:
    """Render the chime called *name* as WAV file bytes."""
    pcm = (np.clip(_render(CHIMES[name]), -1.0, 1.0) * 32767).astype("<i2")
    out = io.BytesIO()
    with wave.open(out, "wb") as wav:
        wav.setparams((1, 2, SAMPLE_RATE, len(pcm), "NONE", "not compressed"))
        wav.writeframes(pcm.tobytes())
    return out.getvalue()


# ═══════════════════════════════════════════════════════════════════════════
#  SOUND MANAGER
# ═══════════════════════════════════════════════════════════════════════════


class SoundManager(QObject):
    """Plays the session chimes.

    An unwritable cache or a missing audio device is logged and leaves the
    manager silent; :meth:`play` never raises.

    Usage::

        sounds = SoundManager(parent=app)
        sounds.set_volume(70)
        sounds.play("work_complete")
    """

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        sounds_dir: Path | None = None,
    ) -> None:
        super().__init__(parent)
        self._enabled = True
        self._volume = 70
        self._effects: dict[str, QSoundEffect] = {}

        cache = sounds_dir or SOUNDS_DIR
        for name in SOUND_NAMES:
            path = cache / f"{name}.wav"
            try:
                if not path.exists():
                    cache.mkdir(parents=True, exist_ok=True)
                    path.write_bytes(chime_wav(name))
            except OSError:
                logger.exception("Could not write sounds to %s", cache)
                continue
            self._effects[name] = self._make_effect(name, path)

    # ── public API ────────────────────────────────────────────────────

    @property
    def volume(self) -> int:
        return self._volume

    @property
    def enabled(self) -> bool:
        return self._enabled

    def set_volume(self, level: int) -> None:
        """Set volume as 0-100; out-of-range values are clamped."""
        self._volume = max(0, min(level, 100))
        for effect in self._effects.values():
            effect.setVolume(self._volume / 100)

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled

    def play(self, name: str) -> None:
        if not self._enabled:
            return
        effect = self._effects.get(name)
        if effect is None:
            logger.debug("No sound loaded for %r", name)
            return
        effect.play()

    # ── internal ──────────────────────────────────────────────────────

    def _make_effect(self, name: str, path: Path) -> QSoundEffect:
        effect = QSoundEffect(self)
        effect.setSource(QUrl.fromLocalFile(str(path)))
        effect.setVolume(self._volume / 100)

        def report() -> None:
            if effect.status() == QSoundEffect.Status.Error:
                logger.warning("Sound %r failed to load from %s", name, path)

        effect.statusChanged.connect(report)
        return effect
