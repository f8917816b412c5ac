"""Core engine: command execution, platform client, env codec, orchestrator."""
