"""Clients for external collaborators: LLM, chat platform, realtime bridge."""
