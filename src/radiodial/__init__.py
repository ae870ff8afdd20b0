"""RadioDial - internet radio playback with live now-playing metadata."""

__version__ = "1.0.0"
