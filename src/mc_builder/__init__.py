"""LLM-driven Minecraft building over RCON."""
