"""Activity logger for Minecraft Bedrock servers."""
