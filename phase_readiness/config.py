"""Application configuration loaded from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "phase-readiness"
    debug: bool = False
    log_level: str = "INFO"

    # Readiness policy (see ReadinessConfig)
    temp_min: float = -20.0
    temp_max: float = 60.0
    max_abs_derivative: float = 0.25
    max_temp_jump: float = 5.0
    ewma_alpha: float = 0.2
    persistence_s: float = 3.0
    hysteresis_block_threshold: float = 0.85
    coherence_allow_threshold: float = 0.35
    max_sample_gap_s: float = 1.0

    # History store
    history_size: int = 100

    # Simulated telemetry feed
    simulate: bool = False
    simulation_step_s: float = 0.1
    simulation_base_temperature: float = 25.0
    simulation_amplitude: float = 2.0
    loop_log_every: int = 10

    model_config = {"env_prefix": "PHASE_READINESS_"}


settings = Settings()
