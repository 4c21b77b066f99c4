class VoiceTrackerError(Exception):
    """Base class for errors raised by the transcript parser."""
    pass


class AmountNotFoundError(VoiceTrackerError, ValueError):
    """
    Raised when no amount can be extracted from a transcript.

    This is the only failure a parse can end in. Callers are expected
    to ask the user to repeat the utterance.
    """

    def __init__(self, transcript: str):
        self.transcript = transcript
        super().__init__(f"No amount found in transcript: '{transcript}'")
