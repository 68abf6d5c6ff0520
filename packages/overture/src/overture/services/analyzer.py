"""Preview clip energy analysis using pydub."""

import io
import logging

import numpy as np
import requests
from pydub import AudioSegment

from overture.exceptions import AudioAnalysisError

logger = logging.getLogger(__name__)

# Largest preview clip accepted for decoding
MAX_PREVIEW_BYTES = 10 * 1024 * 1024
CHUNK_SIZE = 64 * 1024


def rms_energy(segment: AudioSegment) -> float:
    """Root-mean-square amplitude normalized by full scale, clamped to [0, 1].

    Raises:
        AudioAnalysisError: If the segment holds no samples.
    """
    samples = np.array(segment.get_array_of_samples(), dtype=np.float64)
    if samples.size == 0:
        raise AudioAnalysisError("preview contains no samples", "decode")
    full_scale = float(1 << (8 * segment.sample_width - 1))
    rms = float(np.sqrt(np.mean(np.square(samples))))
    return min(max(rms / full_scale, 0.0), 1.0)


def _read_capped(response: requests.Response) -> bytes:
    """Read a streamed body, stopping once it exceeds MAX_PREVIEW_BYTES."""
    declared = response.headers.get("Content-Length")
    if declared and declared.isdigit() and int(declared) > MAX_PREVIEW_BYTES:
        raise AudioAnalysisError(f"preview too large: {declared} bytes", "fetch")

    buffer = bytearray()
    for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
        buffer.extend(chunk)
        if len(buffer) > MAX_PREVIEW_BYTES:
            raise AudioAnalysisError(
                f"preview too large: over {MAX_PREVIEW_BYTES} bytes", "fetch"
            )
    return bytes(buffer)


class PreviewAnalyzer:
    """Fetches preview clips and derives an energy scalar.

    Implements AudioAnalyzerProtocol. Decoding goes through ffmpeg via
    pydub, so any format ffmpeg understands is accepted.
    """

    def __init__(
        self,
        timeout: float = 15.0,
        session: requests.Session | None = None,
    ) -> None:
        self._timeout = timeout
        self._session = session or requests.Session()

    def analyze_preview(self, url: str) -> float:
        """Download a preview clip and compute its energy.

        Args:
            url: Preview audio URL.

        Returns:
            Energy in [0, 1].

        Raises:
            AudioAnalysisError: If the clip cannot be fetched or decoded.
        """
        try:
            with self._session.get(url, timeout=self._timeout, stream=True) as response:
                if response.status_code != 200:
                    raise AudioAnalysisError(
                        f"preview fetch status {response.status_code}", "fetch"
                    )
                content = _read_capped(response)
        except requests.RequestException as e:
            raise AudioAnalysisError(f"preview fetch failed: {e}", "fetch") from e

        try:
            segment = AudioSegment.from_file(io.BytesIO(content))
        except Exception as e:
            raise AudioAnalysisError(
                f"preview decode failed: {type(e).__name__}: {e}", "decode"
            ) from e

        energy = rms_energy(segment)
        logger.debug("Preview energy %.3f for %s", energy, url)
        return energy
