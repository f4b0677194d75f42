"""Infrastructure adapters for the Roblox platform and local persistence."""
