"""Nakama: welcome greetings and quiz-gated self-roles for a Discord server."""
