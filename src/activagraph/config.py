"""
Configuration for the activation network.

Defaults mirror the local LM Studio setup: an OpenAI-compatible server on
localhost with a fast model, a reasoning model and a nomic embedding model.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class NetworkConfig:
    """
    Tunable parameters for an ActivationNetwork.

    Attributes:
        network_path: JSON document the node store is loaded from and saved to
        save_interval: Auto-save after learn when the store size is a multiple of this
        match_threshold: Cosine similarity a node must exceed to resonate
        coherence_threshold: Broad-path coherence above which System 1 answers
        alpha: Scale of the tanh alignment bonus at the edge of chaos
        chaos_threshold: Initial edge-of-chaos gain (bonus active in (1.0, 1.5))
        reset_potentials: Reset all potentials before each learn/think call
        baseline_potential: Value potentials are reset to
        base_url: OpenAI-compatible endpoint of the model server
        api_key: API key for the model server (LM Studio ignores it)
        fast_model: Completion model for System 1 responses
        reason_model: Completion model for System 2 responses
        embed_model: Embedding model
        request_timeout: Per-request timeout in seconds for the model server
    """
    network_path: str = "network.json"
    save_interval: int = 10
    match_threshold: float = 0.7
    coherence_threshold: float = 0.7
    alpha: float = 1.0
    chaos_threshold: float = 1.2
    reset_potentials: bool = False
    baseline_potential: float = 0.0
    base_url: str = "http://localhost:1234/v1"
    api_key: str = "lm-studio"
    fast_model: str = "google/gemma-3n-e4b"
    reason_model: str = "openai/gpt-oss-20b"
    embed_model: str = "text-embedding-nomic-embed-text-v1.5@f16"
    request_timeout: float = 120.0

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "NetworkConfig":
        """
        Build a config from environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)
            **overrides: Explicit values that win over the environment

        Returns:
            NetworkConfig
        """
        env = os.environ if environ is None else environ
        values = {}

        if "ACTIVAGRAPH_NETWORK_PATH" in env:
            values["network_path"] = env["ACTIVAGRAPH_NETWORK_PATH"]
        if "ACTIVAGRAPH_SAVE_INTERVAL" in env:
            values["save_interval"] = int(env["ACTIVAGRAPH_SAVE_INTERVAL"])
        if "ACTIVAGRAPH_RESET_POTENTIALS" in env:
            values["reset_potentials"] = _env_bool(env["ACTIVAGRAPH_RESET_POTENTIALS"])
        if "LMSTUDIO_BASE_URL" in env:
            values["base_url"] = env["LMSTUDIO_BASE_URL"]
        if "LMSTUDIO_API_KEY" in env:
            values["api_key"] = env["LMSTUDIO_API_KEY"]
        if "ACTIVAGRAPH_FAST_MODEL" in env:
            values["fast_model"] = env["ACTIVAGRAPH_FAST_MODEL"]
        if "ACTIVAGRAPH_REASON_MODEL" in env:
            values["reason_model"] = env["ACTIVAGRAPH_REASON_MODEL"]
        if "ACTIVAGRAPH_EMBED_MODEL" in env:
            values["embed_model"] = env["ACTIVAGRAPH_EMBED_MODEL"]
        if "ACTIVAGRAPH_REQUEST_TIMEOUT" in env:
            values["request_timeout"] = float(env["ACTIVAGRAPH_REQUEST_TIMEOUT"])

        values.update(overrides)
        return cls(**values)
