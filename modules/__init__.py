"""
Modules package containing the bot's built-in commands and front-ends.
"""
