from nama_audio.infrastructure.audio.ffplay_engine import FFplayEngine, PlayerState

__all__ = ["FFplayEngine", "PlayerState"]
