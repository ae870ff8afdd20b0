"""Application layer: playback coordination and metadata polling."""
