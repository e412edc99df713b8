class WaveInterferenceError(Exception):
    """Base class for all application errors."""


class RendererInitError(WaveInterferenceError):
    """The rendering surface could not be prepared (kernel compile, bad surface)."""
